import os
import pathlib

import openmdao.api as om

from ._options import options as reentry_options


def run_problem(problem, run_driver=True, restart=None, solution_record_file=None,
                reset_iter_counts=True, case_prefix=None):
    """
    A wrapper around the execution of a reentry problem.

    Parameters
    ----------
    problem : om.Problem
        The problem object to be run, which has already been set up.
    run_driver : bool
        If True, run the driver to optimize the trajectory.  Otherwise only run the model.
    restart : str or Path or None
        The filename of a case database from which the initial guess is loaded.
    solution_record_file : str or None
        Path to the case database in which the final state of the problem is recorded.
        If None, the value of reentry.options['solution_record_file'] is used.  Relative
        paths are placed in the outputs directory of the problem.
    reset_iter_counts : bool
        If True and model has been run previously, reset all iteration counters.
    case_prefix : str or None
        Prefix to prepend to coordinates when recording.

    Returns
    -------
    object
        The result of Problem.run_driver or Problem.run_model.
    """
    if solution_record_file is None:
        solution_record_file = reentry_options['solution_record_file']

    # The restart database may be the one being recorded to, which final_setup clears.
    restart_case = None if restart is None else read_case(restart)

    if solution_record_file:
        problem.add_recorder(om.SqliteRecorder(solution_record_file))
        problem.recording_options['includes'] = ['*']
        problem.recording_options['record_desvars'] = True
        problem.recording_options['record_objectives'] = True
        problem.recording_options['record_constraints'] = True

    problem.final_setup()

    if restart_case is not None:
        problem.load_case(restart_case)

    if run_driver:
        result = problem.run_driver(case_prefix=case_prefix, reset_iter_counts=reset_iter_counts)
    else:
        result = problem.run_model(case_prefix=case_prefix, reset_iter_counts=reset_iter_counts)

    if solution_record_file:
        problem.record('final')

    return result


def get_solution_record_path(problem, solution_record_file=None):
    """
    Return the location of the case database written by run_problem.

    Parameters
    ----------
    problem : om.Problem
        The problem which has been set up.
    solution_record_file : str or None
        The filename given to run_problem.  If None, the value of
        reentry.options['solution_record_file'] is used.

    Returns
    -------
    Path
        The path of the case database.
    """
    if solution_record_file is None:
        solution_record_file = reentry_options['solution_record_file']

    path = pathlib.Path(solution_record_file)
    if path.is_absolute():
        return path
    return pathlib.Path(problem.get_outputs_dir()) / path


def read_case(filename, case_name='final'):
    """
    Read a recorded problem case from a case database.

    Parameters
    ----------
    filename : str or Path
        Path to the case database.
    case_name : str
        The name of the problem case to read.  If no case of this name was recorded, the
        last recorded problem case is returned.

    Returns
    -------
    Case
        The case read from the database.
    """
    if not os.path.exists(filename):
        raise FileNotFoundError(f'Unable to restart from {filename}: no such file.')

    cr = om.CaseReader(filename)

    if 'problem' in cr.list_sources(out_stream=None):
        cases = cr.list_cases('problem', recurse=False, out_stream=None)
    else:
        cases = []

    if not cases:
        raise ValueError(f'Unable to restart from {filename}: no problem cases were recorded.')

    return cr.get_case(case_name if case_name in cases else cases[-1])


def load_case(problem, filename, case_name='final'):
    """
    Load the values of a previously recorded case into the problem.

    Parameters
    ----------
    problem : om.Problem
        The problem into which the values are loaded.
    filename : str or Path
        Path to the case database.
    case_name : str
        The name of the problem case to load.  If no case of this name was recorded, the
        last recorded problem case is loaded.

    Returns
    -------
    Case
        The case which was loaded.
    """
    case = read_case(filename, case_name=case_name)
    problem.load_case(case)
    return case
