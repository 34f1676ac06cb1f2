import numpy as np
import openmdao.api as om
import scipy.sparse as sp

from reentry._options import options as reentry_options
from reentry.transcriptions.grid_data import StepGrid
from reentry.utils.misc import get_rate_units


class StepDefectComp(om.ExplicitComponent):
    r"""
    Class definition for the StepDefectComp.

    StepDefectComp computes the defects of the time-stepping integration rules which
    connect each pair of adjacent knots.  For step ``i`` joining knots ``i`` and ``j = i + 1``

    .. math:: \Delta_i = x_j - x_i - dt_i f_i

    under the *rectangular* rule and

    .. math:: \Delta_i = x_j - x_i - \frac{dt_i}{2} \left( f_i + f_j \right)

    under the *trapezoidal* rule.  Every defect is constrained to zero.

    Parameters
    ----------
    **kwargs : dict
        Dictionary of optional arguments.
    """
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._no_check_partials = not reentry_options['include_check_partials']

    def initialize(self):
        """Declare component options."""
        self.options.declare(
            'grid_data', types=StepGrid,
            desc='Container object for grid info')

        self.options.declare(
            'state_options', types=dict,
            desc='Dictionary of state names/options for the phase')

        self.options.declare(
            'time_units', default=None, allow_none=True, types=str,
            desc='Units of time')

        self.options.declare(
            'rule', values=('rectangular', 'trapezoidal'), default='rectangular',
            desc='Integration rule used to advance the states across each step')

    def setup(self):
        """
        Add the I/O and constraints of the StepDefectComp.
        """
        gd = self.options['grid_data']
        num_nodes = gd.num_nodes
        num_steps = gd.num_steps
        time_units = self.options['time_units']
        state_options = self.options['state_options']

        self.add_input('dt', shape=(num_steps,), units=time_units,
                       desc='Duration of each step')

        self.var_names = var_names = {}
        for state_name in state_options:
            var_names[state_name] = {
                'val': f'states:{state_name}',
                'f': f'f:{state_name}',
                'defect': f'step_defects:{state_name}',
            }

        for state_name, options in state_options.items():
            units = options['units']
            rate_units = get_rate_units(units, time_units)
            var_names = self.var_names[state_name]

            self.add_input(name=var_names['val'],
                           shape=(num_nodes,),
                           units=units,
                           desc=f'Values of state {state_name} at the knots')

            self.add_input(name=var_names['f'],
                           shape=(num_nodes,),
                           units=rate_units,
                           desc=f'Computed derivative of state {state_name} at the knots')

            self.add_output(name=var_names['defect'],
                            shape=(num_steps,),
                            units=units,
                            desc=f'Step defects of state {state_name}')

            if options['defect_ref'] is not None:
                defect_ref = options['defect_ref']
            elif options['ref'] is not None:
                defect_ref = options['ref']
            else:
                defect_ref = 1.0

            self.add_constraint(name=var_names['defect'], equals=0.0, ref=defect_ref)

        self._declare_partials()

    def _declare_partials(self):
        gd = self.options['grid_data']
        num_steps = gd.num_steps
        rule = self.options['rule']

        ar_steps = np.arange(num_steps, dtype=int)

        # Each defect depends on the pair of knots it joins.
        pair_rows = np.repeat(ar_steps, 2)
        pair_cols = np.column_stack((gd.subset_node_indices['step_start'],
                                     gd.subset_node_indices['step_end'])).ravel()

        if rule == 'rectangular':
            # Only the rate at the start of each step contributes.
            d_df = sp.eye(num_steps, gd.num_nodes, format='csr')
        else:
            d_df = sp.csr_matrix((np.ones(2 * num_steps), (pair_rows, pair_cols)),
                                 shape=(num_steps, gd.num_nodes))

        f_rows, f_cols = d_df.nonzero()

        for state_name in self.options['state_options']:
            var_names = self.var_names[state_name]

            self.declare_partials(of=var_names['defect'], wrt=var_names['val'],
                                  rows=pair_rows, cols=pair_cols,
                                  val=np.tile([-1.0, 1.0], num_steps))

            self.declare_partials(of=var_names['defect'], wrt=var_names['f'],
                                  rows=f_rows, cols=f_cols)

            self.declare_partials(of=var_names['defect'], wrt='dt',
                                  rows=ar_steps, cols=ar_steps)

    def compute(self, inputs, outputs):
        """
        Compute the step defects.

        Parameters
        ----------
        inputs : `Vector`
            `Vector` containing inputs.
        outputs : `Vector`
            `Vector` containing outputs.
        """
        dt = inputs['dt']
        rule = self.options['rule']

        for state_name in self.options['state_options']:
            var_names = self.var_names[state_name]
            x = inputs[var_names['val']]
            f = inputs[var_names['f']]

            if rule == 'rectangular':
                increment = dt * f[:-1]
            else:
                increment = 0.5 * dt * (f[:-1] + f[1:])

            outputs[var_names['defect']] = x[1:] - x[:-1] - increment

    def compute_partials(self, inputs, partials):
        """
        Compute sub-jacobian parts. The model is assumed to be in an unscaled state.

        Parameters
        ----------
        inputs : Vector
            Unscaled, dimensional input variables read via inputs[key].
        partials : Jacobian
            Subjac components written to partials[output_name, input_name].
        """
        dt = inputs['dt']
        rule = self.options['rule']

        for state_name in self.options['state_options']:
            var_names = self.var_names[state_name]
            f = inputs[var_names['f']]

            if rule == 'rectangular':
                partials[var_names['defect'], var_names['f']] = -dt
                partials[var_names['defect'], 'dt'] = -f[:-1]
            else:
                partials[var_names['defect'], var_names['f']] = np.repeat(-0.5 * dt, 2)
                partials[var_names['defect'], 'dt'] = -0.5 * (f[:-1] + f[1:])
