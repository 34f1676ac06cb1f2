import numpy as np

from openmdao.api import OptionsDictionary


class StateOptionsDictionary(OptionsDictionary):
    """
    An OptionsDictionary specific to states.

    Parameters
    ----------
    read_only : bool
        If True, setting (via __setitem__ or update) is not permitted.
    """
    def __init__(self, read_only=False):
        super(StateOptionsDictionary, self).__init__(read_only=read_only)

        self.declare(name='name', types=str,
                     desc='name of a state variable')

        self.declare(name='units', types=str, default=None, allow_none=True,
                     desc='units in which the state variable is defined')

        self.declare(name='rate_source', types=str, default=None, allow_none=True,
                     desc='The path to the ODE output which provides the rate of this state variable.')

        self.declare(name='targets', types=(list, tuple), default=None, allow_none=True,
                     desc='Inputs of the ODE to which the state values are connected.  If None, '
                          'the state is connected to the ODE input of the same name.')

        self.declare(name='val', types=(float, int, np.ndarray, list), default=0.0,
                     desc='Default value of the state variable at all knots')

        self.declare(name='opt', default=True, types=bool,
                     desc='If true, the values of the state at the free knots are design variables.')

        self.declare(name='fix_initial', types=bool, default=False,
                     desc='If True, the initial value of this state is not a design variable.')

        self.declare(name='fix_final', types=bool, default=False,
                     desc='If True, the final value of this state is not a design variable.')

        self.declare(name='lower', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='Lower bound of the state variable at the free knots.')

        self.declare(name='upper', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='Upper bound of the state variable at the free knots.')

        self.declare(name='ref0', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='Zero-reference value for the state variable.')

        self.declare(name='ref', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='Unit-reference value for the state variable.')

        self.declare(name='defect_ref', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='Unit-reference value of the step defects for this state.  If None, '
                          'the ref of the state is used.')


class ControlOptionsDictionary(OptionsDictionary):
    """
    An OptionsDictionary specific to controls.

    Parameters
    ----------
    read_only : bool
        If True, setting (via __setitem__ or update) is not permitted.
    """
    def __init__(self, read_only=False):
        super(ControlOptionsDictionary, self).__init__(read_only=read_only)

        self.declare(name='name', types=str,
                     desc='The name of the control variable')

        self.declare(name='units', types=str, default=None, allow_none=True,
                     desc='The units in which the control variable is defined.')

        self.declare(name='targets', types=(list, tuple), default=None, allow_none=True,
                     desc='Inputs of the ODE to which the control values are connected.  If None, '
                          'the control is connected to the ODE input of the same name.')

        self.declare(name='val', types=(float, int, np.ndarray, list), default=0.0,
                     desc='Default value of the control variable at all knots')

        self.declare(name='opt', default=True, types=bool,
                     desc='If true, the values of this control are design variables.')

        self.declare(name='lower', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='The lower bound of the control at the knots.')

        self.declare(name='upper', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='The upper bound of the control at the knots.')

        self.declare(name='ref0', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='The zero-reference value of the control at the knots.')

        self.declare(name='ref', types=(float, int, np.ndarray), default=None, allow_none=True,
                     desc='The unit-reference value of the control at the knots.')


class TimeOptionsDictionary(OptionsDictionary):
    """
    An OptionsDictionary for time options.

    Parameters
    ----------
    read_only : bool
        If True, setting (via __setitem__ or update) is not permitted.
    """
    def __init__(self, read_only=False):
        super(TimeOptionsDictionary, self).__init__(read_only=read_only)

        self.declare('name', types=str, default='time',
                     desc='Name of the integration variable')

        self.declare('units', types=str, default='s', allow_none=True,
                     desc='Units for the integration variable')

        self.declare('initial', types=(float, int), default=0.0,
                     desc='Value of the integration variable at the first knot.')

        self.declare('fix_initial', types=bool, default=True,
                     desc='If True, the initial value of time is not a design variable.')

        self.declare('initial_bounds', types=tuple, default=(None, None),
                     desc='Lower and upper bounds of the initial time when it is a design variable.')

        self.declare('dt', types=(float, int, np.ndarray, list), default=1.0,
                     desc='Default duration of every step.')

        self.declare('fix_dt', types=bool, default=True,
                     desc='If True, the step durations are not design variables.')

        self.declare('dt_bounds', types=tuple, default=(None, None),
                     desc='Lower and upper bounds of each step duration when they are design variables.')

        self.declare('dt_ref', types=(float, int), default=None, allow_none=True,
                     desc='Unit-reference value for the step durations.')

        self.declare('targets', types=(list, tuple), default=[],
                     desc='Inputs of the ODE to which the time at each knot is connected.')
