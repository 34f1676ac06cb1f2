import numpy as np
import openmdao.api as om

from reentry._options import options as reentry_options


class TimeComp(om.ExplicitComponent):
    """
    Compute the time at each knot from the initial time and the step durations.

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
        self.options.declare('num_nodes', types=int,
                             desc='The total number of knots at which time is provided.')

        self.options.declare('units', default=None, allow_none=True, types=str,
                             desc='Units of time')

    def setup(self):
        """
        Add the I/O of the TimeComp.
        """
        nn = self.options['num_nodes']
        ns = nn - 1
        units = self.options['units']

        self.add_input('t_initial', val=0.0, units=units)
        self.add_input('dt', val=np.ones(ns), units=units)

        self.add_output('time', val=np.zeros(nn), units=units)
        self.add_output('t_duration', val=1.0, units=units)

        # time[k] = t_initial + sum(dt[:k]), a constant lower-triangular jacobian.
        r, c = np.tril_indices(ns)
        self.declare_partials(of='time', wrt='dt', rows=r + 1, cols=c, val=1.0)
        self.declare_partials(of='time', wrt='t_initial',
                              rows=np.arange(nn, dtype=int), cols=np.zeros(nn, dtype=int), val=1.0)
        self.declare_partials(of='t_duration', wrt='dt', val=1.0)

    def compute(self, inputs, outputs):
        """
        Compute the time at each knot.

        Parameters
        ----------
        inputs : `Vector`
            `Vector` containing inputs.
        outputs : `Vector`
            `Vector` containing outputs.
        """
        t_initial = inputs['t_initial']
        dt = inputs['dt']

        outputs['time'] = t_initial + np.concatenate(([0.0], np.cumsum(dt)))
        outputs['t_duration'] = np.sum(dt)
