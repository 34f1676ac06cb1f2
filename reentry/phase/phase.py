import numpy as np
import openmdao.api as om
from scipy.interpolate import interp1d

from .options import StateOptionsDictionary, ControlOptionsDictionary, TimeOptionsDictionary
from ..transcriptions.transcription_base import TranscriptionBase
from ..transcriptions.components import StepDefectComp, TimeComp


class Phase(om.Group):
    """
    The Phase object in reentry.

    A Phase discretizes a dynamic system on a grid of knots joined by time steps. The
    states and controls at every knot, and optionally the duration of every step, are
    decision variables.  The ODE is evaluated at every knot and the integration rule of the
    transcription ties the states at adjacent knots together through equality constraints.

    Parameters
    ----------
    **kwargs : dict
        Dictionary of optional phase arguments.

    Attributes
    ----------
    state_options : dict of {str: StateOptionsDictionary}
        Options for each state in the phase.
    control_options : dict of {str: ControlOptionsDictionary}
        Options for each control in the phase.
    time_options : TimeOptionsDictionary
        Options for time and the step durations in the phase.
    """
    def __init__(self, **kwargs):
        super(Phase, self).__init__(**kwargs)

        self.state_options = {}
        self.control_options = {}
        self.time_options = TimeOptionsDictionary()

        self._objectives = {}
        self._boundary_constraints = []
        self._path_constraints = []

    def initialize(self):
        """
        Declare instantiation options for the phase.
        """
        self.options.declare('ode_class', default=None,
                             desc='System defining the ODE.  It must accept the option num_nodes.',
                             recordable=False)
        self.options.declare('ode_init_kwargs', types=dict, default={},
                             desc='Keyword arguments provided when initializing the ODE System')
        self.options.declare('transcription', types=TranscriptionBase,
                             desc='Transcription technique of the optimal control problem.')

    def add_state(self, name, **kwargs):
        """
        Add a state variable to be integrated by the phase.

        Parameters
        ----------
        name : str
            Name of the state variable.
        **kwargs : dict
            Options for the state, as declared in StateOptionsDictionary.
        """
        if name in self.control_options:
            raise ValueError(f'{name} has already been added as a control.')

        if name == self.time_options['name']:
            raise ValueError(f'{name} is the name of the integration variable.')

        self.set_state_options(name, **kwargs)

    def set_state_options(self, name, **kwargs):
        """
        Set options that apply to the state variable of the given name.

        If the state has not been added it is added with the given options.

        Parameters
        ----------
        name : str
            Name of the state variable.
        **kwargs : dict
            Options for the state, as declared in StateOptionsDictionary.
        """
        if name not in self.state_options:
            self.state_options[name] = StateOptionsDictionary()
            self.state_options[name]['name'] = name

        self.state_options[name].update(kwargs)

    def add_control(self, name, **kwargs):
        """
        Add a control variable to the phase.

        Parameters
        ----------
        name : str
            The name of the control variable.
        **kwargs : dict
            Options for the control, as declared in ControlOptionsDictionary.
        """
        if name in self.state_options:
            raise ValueError(f'{name} has already been added as a state.')

        if name == self.time_options['name']:
            raise ValueError(f'{name} is the name of the integration variable.')

        if name not in self.control_options:
            self.control_options[name] = ControlOptionsDictionary()
            self.control_options[name]['name'] = name

        self.control_options[name].update(kwargs)

    def set_time_options(self, **kwargs):
        """
        Set options for time and the step durations of the phase.

        Parameters
        ----------
        **kwargs : dict
            Options for time, as declared in TimeOptionsDictionary.
        """
        self.time_options.update(kwargs)

        lower, upper = self.time_options['dt_bounds']
        if lower is not None and upper is not None and lower > upper:
            raise ValueError(f'dt_bounds lower bound ({lower}) exceeds the upper bound ({upper}).')

    def add_boundary_constraint(self, name, loc, lower=None, upper=None, equals=None,
                                ref=None, ref0=None, units=None):
        """
        Add a constraint on a variable at the initial or final knot of the phase.

        Parameters
        ----------
        name : str
            Name of a state, control, time, or an output of the ODE.
        loc : str
            The location of the constraint, 'initial' or 'final'.
        lower : float or None
            Lower bound of the constraint.
        upper : float or None
            Upper bound of the constraint.
        equals : float or None
            Equality value of the constraint.
        ref : float or None
            Unit-reference value of the constraint.
        ref0 : float or None
            Zero-reference value of the constraint.
        units : str or None
            Units in which the constraint is applied.
        """
        if loc not in ('initial', 'final'):
            raise ValueError(f"Invalid boundary constraint location '{loc}'. "
                             f"Must be 'initial' or 'final'.")

        self._boundary_constraints.append({'name': name, 'loc': loc, 'lower': lower,
                                           'upper': upper, 'equals': equals, 'ref': ref,
                                           'ref0': ref0, 'units': units})

    def add_path_constraint(self, name, lower=None, upper=None, equals=None,
                            ref=None, ref0=None, units=None):
        """
        Add a constraint on a variable at every knot of the phase.

        Parameters
        ----------
        name : str
            Name of a state, control, or an output of the ODE.
        lower : float or None
            Lower bound of the constraint.
        upper : float or None
            Upper bound of the constraint.
        equals : float or None
            Equality value of the constraint.
        ref : float or None
            Unit-reference value of the constraint.
        ref0 : float or None
            Zero-reference value of the constraint.
        units : str or None
            Units in which the constraint is applied.
        """
        self._path_constraints.append({'name': name, 'lower': lower, 'upper': upper,
                                       'equals': equals, 'ref': ref, 'ref0': ref0,
                                       'units': units})

    def add_objective(self, name, loc='final', index=None, ref=None, ref0=None,
                      adder=None, scaler=None, units=None):
        """
        Add an objective to the phase.

        To maximize a quantity, give it a negative ref (or scaler).

        Parameters
        ----------
        name : str
            Name of a state, control, time, t_duration, or an output of the ODE.
        loc : str
            Where in the phase the objective is to be evaluated, 'initial' or 'final'.
        index : int or None
            If given, the knot index at which the objective is evaluated.  Overrides loc.
        ref : float or None
            Value of the response that scales to 1.0 in the driver.
        ref0 : float or None
            Value of the response that scales to 0.0 in the driver.
        adder : float or None
            Value to add to the model value to get the scaled value.
        scaler : float or None
            Value to multiply the model value to get the scaled value.
        units : str or None
            Units in which the objective is computed.
        """
        if loc not in ('initial', 'final'):
            raise ValueError(f"Invalid objective location '{loc}'. Must be 'initial' or 'final'.")

        self._objectives[name] = {'loc': loc, 'index': index, 'ref': ref, 'ref0': ref0,
                                  'adder': adder, 'scaler': scaler, 'units': units}

    def interp(self, name, ys, xs=None, kind='linear'):
        """
        Interpolate values onto the knots of the phase.

        Parameters
        ----------
        name : str
            The name of the state or control being interpolated.
        ys : list or ndarray
            Array of values to be interpolated.
        xs : list or ndarray or None
            Independent values corresponding to ys.  If None, ys are assumed to be evenly
            spaced across the phase.
        kind : str
            The kind of interpolation, as accepted by scipy.interpolate.interp1d.

        Returns
        -------
        np.array
            The values of ys interpolated onto the knots of the phase.
        """
        if name not in self.state_options and name not in self.control_options:
            raise ValueError(f'Unable to interpolate {name}: it is neither a state nor a '
                             f'control of the phase.')

        node_ptau = self.options['transcription'].grid_data.node_ptau
        ys = np.asarray(ys, dtype=float).ravel()

        if ys.size == 1:
            return ys[0] * np.ones_like(node_ptau)

        if xs is None:
            ptau = np.linspace(-1.0, 1.0, ys.size)
        else:
            xs = np.asarray(xs, dtype=float).ravel()
            ptau = -1.0 + 2.0 * (xs - xs[0]) / (xs[-1] - xs[0])

        interpfunc = interp1d(ptau, ys, kind=kind, bounds_error=False, fill_value='extrapolate')
        return interpfunc(node_ptau)

    def get_state_targets(self, name):
        """
        Return the ODE inputs to which the given state is connected.

        Parameters
        ----------
        name : str
            The name of the state.

        Returns
        -------
        list of str
            The ODE inputs connected to the state.
        """
        targets = self.state_options[name]['targets']
        return [name] if targets is None else list(targets)

    def get_control_targets(self, name):
        """
        Return the ODE inputs to which the given control is connected.

        Parameters
        ----------
        name : str
            The name of the control.

        Returns
        -------
        list of str
            The ODE inputs connected to the control.
        """
        targets = self.control_options[name]['targets']
        return [name] if targets is None else list(targets)

    def setup(self):
        """
        Build the model hierarchy for the phase.
        """
        tx = self.options['transcription']
        ode_class = self.options['ode_class']

        if ode_class is None:
            raise ValueError(f'{self.msginfo}: ode_class must be provided.')

        if not self.state_options:
            raise ValueError(f'{self.msginfo}: the phase has no states.')

        gd = tx.grid_data
        nn = gd.num_nodes
        time_units = self.time_options['units']

        indep = om.IndepVarComp()
        indep.add_output('t_initial', val=self.time_options['initial'], units=time_units)
        indep.add_output('dt', val=_broadcast(self.time_options['dt'], gd.num_steps),
                         units=time_units)

        for name, options in self.state_options.items():
            indep.add_output(f'states:{name}', val=_broadcast(options['val'], nn),
                             units=options['units'])

        for name, options in self.control_options.items():
            indep.add_output(f'controls:{name}', val=_broadcast(options['val'], nn),
                             units=options['units'])

        self.add_subsystem('indep_vars', indep, promotes_outputs=['*'])

        self.add_subsystem('time_comp', TimeComp(num_nodes=nn, units=time_units),
                           promotes_inputs=['t_initial', 'dt'],
                           promotes_outputs=['time', 't_duration'])

        self.add_subsystem('rhs', ode_class(num_nodes=nn, **self.options['ode_init_kwargs']))

        self.add_subsystem('collocation_constraint',
                           StepDefectComp(grid_data=gd, state_options=self.state_options,
                                          time_units=time_units, rule=tx.rule),
                           promotes_inputs=['dt'] + [f'states:{name}' for name in self.state_options])

        self._setup_connections()
        self._setup_design_vars()
        self._setup_responses()

    def _setup_connections(self):
        for tgt in self.time_options['targets']:
            self.connect('time', f'rhs.{tgt}')

        for name, options in self.state_options.items():
            for tgt in self.get_state_targets(name):
                self.connect(f'states:{name}', f'rhs.{tgt}')

            rate_source = options['rate_source']
            if rate_source is None:
                raise ValueError(f'{self.msginfo}: state {name} has no rate_source.')
            self.connect(f'rhs.{rate_source}', f'collocation_constraint.f:{name}')

        for name in self.control_options:
            for tgt in self.get_control_targets(name):
                self.connect(f'controls:{name}', f'rhs.{tgt}')

    def _setup_design_vars(self):
        tx = self.options['transcription']
        gd = tx.grid_data
        time_options = self.time_options

        if not time_options['fix_initial']:
            lower, upper = time_options['initial_bounds']
            self.add_design_var('t_initial', lower=lower, upper=upper)

        if not time_options['fix_dt']:
            lower, upper = time_options['dt_bounds']
            self.add_design_var('dt', lower=lower, upper=upper, ref=time_options['dt_ref'])

        for name, options in self.state_options.items():
            if not options['opt']:
                continue

            # Fixed endpoints hold the boundary values set by the user.
            idxs = gd.subset_node_indices['all']
            if options['fix_initial']:
                idxs = idxs[1:]
            if options['fix_final']:
                idxs = idxs[:-1]

            if idxs.size > 0:
                self.add_design_var(f'states:{name}', lower=options['lower'], upper=options['upper'],
                                    ref0=options['ref0'], ref=options['ref'], indices=idxs)

        for name, options in self.control_options.items():
            if not options['opt']:
                continue

            self.add_design_var(f'controls:{name}', lower=options['lower'], upper=options['upper'],
                                ref0=options['ref0'], ref=options['ref'],
                                indices=tx.control_input_indices)

    def _setup_responses(self):
        nn = self.options['transcription'].grid_data.num_nodes

        for con in self._boundary_constraints:
            idx = 0 if con['loc'] == 'initial' else nn - 1
            self.add_constraint(self._get_var_path(con['name']), lower=con['lower'],
                                upper=con['upper'], equals=con['equals'], ref=con['ref'],
                                ref0=con['ref0'], units=con['units'], indices=[idx],
                                alias=f'{self.pathname}->{con["loc"]}_boundary_constraint->{con["name"]}')

        for con in self._path_constraints:
            self.add_constraint(self._get_var_path(con['name']), lower=con['lower'],
                                upper=con['upper'], equals=con['equals'], ref=con['ref'],
                                ref0=con['ref0'], units=con['units'])

        if not self._objectives:
            om.issue_warning('No objective has been added to the phase.', prefix=self.msginfo)

        for name, obj in self._objectives.items():
            path = self._get_var_path(name)
            if path == 't_duration':
                index = None
            elif obj['index'] is not None:
                index = obj['index']
            else:
                index = 0 if obj['loc'] == 'initial' else nn - 1

            super(Phase, self).add_objective(path, index=index, ref=obj['ref'], ref0=obj['ref0'],
                                             adder=obj['adder'], scaler=obj['scaler'],
                                             units=obj['units'])

    def _get_var_path(self, name):
        if name in self.state_options:
            return f'states:{name}'
        elif name in self.control_options:
            return f'controls:{name}'
        elif name == self.time_options['name']:
            return 'time'
        elif name == 't_duration':
            return 't_duration'
        return f'rhs.{name}'


def _broadcast(val, n):
    return np.broadcast_to(np.asarray(val, dtype=float), (n,)).copy()
