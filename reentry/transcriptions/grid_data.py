"""
Grid specification and node data for the time-stepping transcriptions.
"""
import numpy as np


class StepGrid(object):
    """
    Properties associated with a grid of knots connected by single time steps.

    The grid is a sequence of ``num_nodes`` knots. Each adjacent pair of knots is joined
    by one time step, so the grid contains ``num_nodes - 1`` steps.  The duration of each
    step is not a property of the grid; it is carried by the phase as a decision variable.

    Parameters
    ----------
    num_nodes : int
        The number of knots in the grid.

    Attributes
    ----------
    num_nodes : int
        The total number of knots in the grid.
    num_steps : int
        The number of time steps between knots.
    node_ptau : ndarray
        The location of each node on the interval [-1, 1], evenly spaced.
    subset_node_indices : dict of str: ndarray
        Indices of the nodes which belong to each named subset.
    subset_num_nodes : dict of str: int
        The number of nodes in each named subset.
    """
    def __init__(self, num_nodes):
        if not isinstance(num_nodes, (int, np.integer)) or isinstance(num_nodes, bool):
            raise TypeError(f'num_nodes must be an int, got {type(num_nodes).__name__}.')
        if num_nodes < 2:
            raise ValueError(f'A step grid requires at least 2 nodes, got {num_nodes}.')

        self.num_nodes = int(num_nodes)
        self.num_steps = self.num_nodes - 1
        self.node_ptau = np.linspace(-1.0, 1.0, self.num_nodes)

        idxs = np.arange(self.num_nodes, dtype=int)

        self.subset_node_indices = {
            'all': idxs,
            'step_start': idxs[:-1],
            'step_end': idxs[1:],
            'initial': idxs[:1],
            'final': idxs[-1:],
        }

        self.subset_num_nodes = {name: len(val) for name, val in self.subset_node_indices.items()}

    def __repr__(self):
        return f'{self.__class__.__name__}(num_nodes={self.num_nodes})'
