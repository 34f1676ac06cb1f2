"""
reentry - Maximum-crossrange reentry trajectory optimization, using OpenMDAO.
"""
__version__ = '0.3.0'


__all__ = ['Phase',
           'Rectangular', 'Trapezoidal', 'transcription_from_rule',
           'StepGrid',
           'run_problem',
           'load_case',
           'get_solution_record_path',
           'simulate_phase',
           'options']


from .phase import Phase
from .transcriptions import Rectangular, Trapezoidal, transcription_from_rule
from .transcriptions.grid_data import StepGrid
from .run_problem import run_problem, load_case, get_solution_record_path
from .simulate import simulate_phase
from ._options import options
