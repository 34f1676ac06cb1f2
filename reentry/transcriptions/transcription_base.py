import openmdao.api as om

from .grid_data import StepGrid


class TranscriptionBase(object):
    """
    Base class for the time-stepping transcriptions.

    Parameters
    ----------
    **kwargs : dict
        Dictionary of optional arguments.

    Attributes
    ----------
    options : OptionsDictionary
        Options for the transcription.
    grid_data : StepGrid
        The grid of knots on which the phase is discretized.
    """
    rule = None

    def __init__(self, **kwargs):
        self.options = om.OptionsDictionary()

        self.options.declare('num_nodes', types=int, default=11,
                             desc='Number of knots in the phase, including both endpoints.')

        self.initialize()
        self.options.update(kwargs)

        self.grid_data = StepGrid(num_nodes=self.options['num_nodes'])

    def initialize(self):
        """
        Declare transcription-specific options.
        """
        pass

    @property
    def control_input_indices(self):
        """
        Indices of the knots at which control values influence the step defects.

        Returns
        -------
        ndarray
            The knot indices whose control values are design variables.
        """
        raise NotImplementedError(f'Transcription {self.__class__.__name__} does not '
                                  f'implement control_input_indices.')

    def __repr__(self):
        return f'{self.__class__.__name__}(num_nodes={self.options["num_nodes"]})'


class Rectangular(TranscriptionBase):
    """
    Rectangular (explicit Euler) integration between adjacent knots.

    The state at each knot is the state at the previous knot advanced by the step
    duration times the state rate evaluated at the previous knot.

    Parameters
    ----------
    **kwargs : dict
        Dictionary of optional arguments.
    """
    rule = 'rectangular'

    @property
    def control_input_indices(self):
        """
        Indices of the knots at which control values influence the step defects.

        The rate at the final knot never enters a rectangular step, so the final control
        value is not a design variable.

        Returns
        -------
        ndarray
            The knot indices whose control values are design variables.
        """
        return self.grid_data.subset_node_indices['step_start']


class Trapezoidal(TranscriptionBase):
    """
    Trapezoidal integration between adjacent knots.

    Parameters
    ----------
    **kwargs : dict
        Dictionary of optional arguments.
    """
    rule = 'trapezoidal'

    @property
    def control_input_indices(self):
        """
        Indices of the knots at which control values influence the step defects.

        Returns
        -------
        ndarray
            The knot indices whose control values are design variables.
        """
        return self.grid_data.subset_node_indices['all']


_TRANSCRIPTIONS = {'rectangular': Rectangular,
                   'trapezoidal': Trapezoidal}


def transcription_from_rule(rule, **kwargs):
    """
    Instantiate the transcription which implements the given integration rule.

    Parameters
    ----------
    rule : str
        The name of the integration rule, 'rectangular' or 'trapezoidal'.
    **kwargs : dict
        Options passed to the transcription.

    Returns
    -------
    TranscriptionBase
        The transcription instance.
    """
    try:
        tx_class = _TRANSCRIPTIONS[rule]
    except (KeyError, TypeError):
        raise ValueError(f"Unexpected integration rule '{rule}'. "
                         f"Valid rules are {sorted(_TRANSCRIPTIONS)}.")
    return tx_class(**kwargs)
