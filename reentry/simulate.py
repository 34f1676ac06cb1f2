"""
Explicit integration of a solved phase, used to check the accuracy of the discretization.
"""
import numpy as np
import openmdao.api as om
from scipy.integrate import solve_ivp
from scipy.interpolate import interp1d

from .utils.misc import get_rate_units


class SimulationResults(object):
    """
    The trajectory obtained by explicitly integrating the ODE of a phase.

    Parameters
    ----------
    time : ndarray
        The times at which the states are reported (the knot times of the phase).
    states : dict of {str: ndarray}
        The integrated value of each state at each reported time.
    units : dict of {str: str}
        The units of each state.
    sol : OdeResult
        The raw result of scipy.integrate.solve_ivp.

    Attributes
    ----------
    time : ndarray
        The times at which the states are reported (the knot times of the phase).
    states : dict of {str: ndarray}
        The integrated value of each state at each reported time.
    units : dict of {str: str}
        The units of each state.
    sol : OdeResult
        The raw result of scipy.integrate.solve_ivp.
    """
    def __init__(self, time, states, units, sol):
        self.time = time
        self.states = states
        self.units = units
        self.sol = sol

    def state_errors(self, problem, phase):
        """
        Compute the largest difference between the discretized and integrated states.

        Parameters
        ----------
        problem : om.Problem
            The problem containing the phase.
        phase : Phase
            The phase which was simulated.

        Returns
        -------
        dict of {str: float}
            The maximum absolute difference of each state over all knots, in the units
            of the state.
        """
        errors = {}
        for name, vals in self.states.items():
            disc = problem.get_val(f'{phase.pathname}.states:{name}', units=self.units[name])
            # A failed integration only covers the leading knots.
            errors[name] = float(np.max(np.abs(disc[:vals.size] - vals)))
        return errors


def simulate_phase(problem, phase, method='RK45', rtol=1.0E-9, atol=1.0E-9):
    """
    Integrate the ODE of a phase from its initial states using its discretized controls.

    The controls are held at the value of the knot at the start of each step when the
    phase uses the rectangular rule, and interpolated linearly between knots when it uses
    the trapezoidal rule, so that the simulation sees the same control history that the
    integration rule assumes.

    Parameters
    ----------
    problem : om.Problem
        The problem containing the phase.  The model must have been run.
    phase : Phase
        The phase to be simulated.
    method : str
        The integration method used by scipy.integrate.solve_ivp.
    rtol : float
        Relative tolerance of the integration.
    atol : float
        Absolute tolerance of the integration.

    Returns
    -------
    SimulationResults
        The simulated trajectory at the knot times of the phase.
    """
    tx = phase.options['transcription']
    time_options = phase.time_options
    time_units = time_options['units']
    path = phase.pathname

    t = problem.get_val(f'{path}.time', units=time_units)

    kind = 'previous' if tx.rule == 'rectangular' else 'linear'
    control_interps = {}
    for name, options in phase.control_options.items():
        u = problem.get_val(f'{path}.controls:{name}', units=options['units'])
        control_interps[name] = interp1d(t, u, kind=kind, bounds_error=False,
                                         fill_value=(u[0], u[-1]))

    y0 = np.array([problem.get_val(f'{path}.states:{name}', units=options['units'])[0]
                   for name, options in phase.state_options.items()])

    sim_prob = om.Problem(reports=False)
    sim_prob.model.add_subsystem('ode',
                                 phase.options['ode_class'](num_nodes=1,
                                                            **phase.options['ode_init_kwargs']),
                                 promotes=['*'])
    sim_prob.setup()
    sim_prob.final_setup()

    def ode_func(time, y):
        for tgt in time_options['targets']:
            sim_prob.set_val(tgt, time, units=time_units)

        for i, (name, options) in enumerate(phase.state_options.items()):
            for tgt in phase.get_state_targets(name):
                sim_prob.set_val(tgt, y[i], units=options['units'])

        for name, options in phase.control_options.items():
            u = control_interps[name](time)
            for tgt in phase.get_control_targets(name):
                sim_prob.set_val(tgt, u, units=options['units'])

        sim_prob.run_model()

        return np.array([sim_prob.get_val(options['rate_source'],
                                          units=get_rate_units(options['units'], time_units))[0]
                         for options in phase.state_options.values()])

    sol = solve_ivp(ode_func, t_span=(t[0], t[-1]), y0=y0, method=method, t_eval=t,
                    rtol=rtol, atol=atol)

    if not sol.success:
        om.issue_warning(f'Simulation of {path} failed: {sol.message}')

    states = {name: sol.y[i] for i, name in enumerate(phase.state_options)}
    units = {name: options['units'] for name, options in phase.state_options.items()}

    return SimulationResults(time=sol.t, states=states, units=units, sol=sol)
