"""
Maximum crossrange reentry of the Space Shuttle.

The vehicle begins its reentry at an altitude where the aerodynamic forces are small and
glides to the terminal area energy management (TAEM) interface, maximizing the final
latitude (crossrange) along the way.

References
----------
.. [1] Betts, John T., Practical Methods for Optimal Control and Estimation Using Nonlinear
       Programming, p. 248, 2010.
"""
import argparse
import sys

import numpy as np
import openmdao.api as om

from reentry.phase import Phase
from reentry.run_problem import run_problem, get_solution_record_path
from reentry.transcriptions import transcription_from_rule
from reentry.shuttle.shuttle_ode import ShuttleODE


# Values and units of the states at the start of reentry.
INITIAL_CONDITIONS = {'h': (260000.0, 'ft'),
                      'phi': (0.0, 'deg'),
                      'theta': (0.0, 'deg'),
                      'v': (25600.0, 'ft/s'),
                      'gamma': (-1.0, 'deg'),
                      'psi': (90.0, 'deg')}

# Values and units of the states at the TAEM interface.
TAEM_CONDITIONS = {'h': (80000.0, 'ft'),
                   'v': (2500.0, 'ft/s'),
                   'gamma': (-5.0, 'deg')}


def shuttle_reentry_problem(num_nodes=2009, integration='rectangular', optimizer='IPOPT',
                            dt=1.0, fix_dt=True, dt_bounds=(0.5, 1.5), heating_limit=None,
                            linear_solver='mumps', print_level=5, declare_coloring=True):
    """
    Build the maximum crossrange problem for the shuttle reentry.

    Parameters
    ----------
    num_nodes : int
        Number of knots in the discretized trajectory.
    integration : str
        Integration rule between adjacent knots, 'rectangular' or 'trapezoidal'.
    optimizer : str
        IPOPT or SNOPT (through pyOptSparse), or any optimizer of ScipyOptimizeDriver.
    dt : float
        Duration of each step (s), and its initial guess when the steps are free.
    fix_dt : bool
        If True, the step durations are fixed.  Otherwise each step duration is a design
        variable bounded by dt_bounds.
    dt_bounds : tuple
        Lower and upper bounds of each step duration (s) when the steps are free.
    heating_limit : float or None
        If given, the maximum wing leading edge heating rate (BTU/ft**2/s) at every knot.
    linear_solver : str
        The linear solver used by IPOPT.  ma27 is usually much faster than mumps when the
        HSL solvers are available.
    print_level : int
        The print level of IPOPT.
    declare_coloring : bool
        If True, use total derivative coloring in the driver.

    Returns
    -------
    om.Problem
        The problem, set up and populated with the initial guess.
    """
    p = om.Problem(model=om.Group())

    if optimizer in ('IPOPT', 'SNOPT'):
        p.driver = om.pyOptSparseDriver(optimizer=optimizer)
        if optimizer == 'IPOPT':
            p.driver.opt_settings['mu_strategy'] = 'monotone'
            p.driver.opt_settings['linear_solver'] = linear_solver
            p.driver.opt_settings['print_level'] = print_level
    else:
        p.driver = om.ScipyOptimizeDriver(optimizer=optimizer)

    if declare_coloring:
        p.driver.declare_coloring()

    tx = transcription_from_rule(integration, num_nodes=num_nodes)

    phase = Phase(ode_class=ShuttleODE, transcription=tx)
    p.model.add_subsystem('phase0', phase)

    phase.set_time_options(units='s', fix_initial=True, initial=0.0, dt=dt, fix_dt=fix_dt,
                           dt_bounds=dt_bounds)

    phase.add_state('h', units='ft', rate_source='h_dot', fix_initial=True, fix_final=True,
                    lower=0.0, ref=1.0E5)
    phase.add_state('phi', units='rad', rate_source='phi_dot', targets=[], fix_initial=True)
    phase.add_state('theta', units='rad', rate_source='theta_dot', fix_initial=True,
                    lower=np.radians(-89.0), upper=np.radians(89.0))
    phase.add_state('v', units='ft/s', rate_source='v_dot', fix_initial=True, fix_final=True,
                    lower=1.0, ref=1.0E4)
    phase.add_state('gamma', units='rad', rate_source='gamma_dot', fix_initial=True,
                    fix_final=True, lower=np.radians(-89.0), upper=np.radians(89.0))
    phase.add_state('psi', units='rad', rate_source='psi_dot', fix_initial=True)

    phase.add_control('alpha', units='rad', lower=np.radians(-90.0), upper=np.radians(90.0))
    phase.add_control('beta', units='rad', lower=np.radians(-89.0), upper=np.radians(1.0))

    if heating_limit is not None:
        phase.add_path_constraint('q', upper=heating_limit, ref=heating_limit)

    # Maximize crossrange
    phase.add_objective('theta', loc='final', ref=-1.0)

    p.setup()

    set_initial_guess(p, phase, dt=dt)

    return p


def set_initial_guess(problem, phase, dt=1.0):
    """
    Set the initial guess as a linear interpolation between the boundary conditions.

    States without a TAEM condition hold their initial value across the phase, the
    controls are zero, and every step has duration dt.

    Parameters
    ----------
    problem : om.Problem
        The problem containing the phase, which has been set up.
    phase : Phase
        The shuttle reentry phase.
    dt : float
        Duration of every step (s).
    """
    path = phase.pathname

    problem.set_val(f'{path}.t_initial', 0.0, units='s')
    problem.set_val(f'{path}.dt', dt, units='s')

    for name, (val_0, units) in INITIAL_CONDITIONS.items():
        val_f, units_f = TAEM_CONDITIONS.get(name, (val_0, units))
        if units_f != units:
            raise ValueError(f'Inconsistent units for {name}: {units} and {units_f}.')
        problem.set_val(f'{path}.states:{name}', phase.interp(name, [val_0, val_f]), units=units)

    problem.set_val(f'{path}.controls:alpha', 0.0, units='deg')
    problem.set_val(f'{path}.controls:beta', 0.0, units='deg')


def crossrange_summary(problem, phase_path='phase0', out_stream=sys.stdout):
    """
    Report the crossrange, final time, and peak heating of the current solution.

    Parameters
    ----------
    problem : om.Problem
        The shuttle reentry problem, after it has been run.
    phase_path : str
        The pathname of the reentry phase in the model.
    out_stream : file-like or None
        Where to write the report.  If None, nothing is written.

    Returns
    -------
    dict
        The final latitude (deg), final time (s) and peak heating rate (BTU/ft**2/s).
    """
    summary = {
        'theta_f': float(problem.get_val(f'{phase_path}.states:theta', units='deg')[-1]),
        'time_f': float(problem.get_val(f'{phase_path}.time', units='s')[-1]),
        'q_max': float(np.max(problem.get_val(f'{phase_path}.rhs.q', units='Btu/(ft**2*s)'))),
    }

    if out_stream is not None:
        print(f"Final latitude theta = {summary['theta_f']:.2f} deg", file=out_stream)
        print(f"Final time = {summary['time_f']:.2f} s", file=out_stream)
        print(f"Peak heating q = {summary['q_max']:.2f} BTU/ft**2/s", file=out_stream)

    return summary


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Maximum crossrange reentry of the Space Shuttle.')
    parser.add_argument('--num-nodes', type=int, default=2009,
                        help='number of knots in the discretized trajectory')
    parser.add_argument('--integration', choices=('rectangular', 'trapezoidal'),
                        default='rectangular', help='integration rule between adjacent knots')
    parser.add_argument('--optimizer', default='IPOPT',
                        help='IPOPT, SNOPT, or an optimizer of ScipyOptimizeDriver')
    parser.add_argument('--linear-solver', default='mumps', help='linear solver used by IPOPT')
    parser.add_argument('--free-dt', action='store_true',
                        help='make each step duration a design variable in [0.5, 1.5] s')
    parser.add_argument('--heating-limit', type=float, default=None,
                        help='maximum wing leading edge heating rate (BTU/ft**2/s)')
    parser.add_argument('--restart', default=None,
                        help='case database from which the initial guess is loaded')
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)

    p = shuttle_reentry_problem(num_nodes=args.num_nodes, integration=args.integration,
                                optimizer=args.optimizer, fix_dt=not args.free_dt,
                                heating_limit=args.heating_limit,
                                linear_solver=args.linear_solver)

    run_problem(p, run_driver=True, restart=args.restart)
    crossrange_summary(p)
    print(f"Solution recorded to {get_solution_record_path(p)}")
    return p


if __name__ == '__main__':
    main()
