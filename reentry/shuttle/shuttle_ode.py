import numpy as np
import openmdao.api as om

from .atmosphere_comp import AtmosphereComp
from .aerodynamics_comp import AerodynamicsComp
from .flight_dynamics_comp import FlightDynamicsComp
from .heating_comp import HeatingComp


class ShuttleODE(om.Group):
    """
    The ODE for the shuttle reentry problem.

    States are altitude h, longitude phi, latitude theta, velocity v, flight path angle gamma
    and azimuth psi.  Controls are the angle of attack alpha and the bank angle beta.

    References
    ----------
    .. [1] Betts, John T., Practical Methods for Optimal Control and Estimation Using Nonlinear
           Programming, p. 248, 2010.
    """
    def initialize(self):
        self.options.declare('num_nodes', types=int)

    def setup(self):
        nn = self.options['num_nodes']

        self.add_subsystem('atmosphere', subsys=AtmosphereComp(num_nodes=nn),
                           promotes_inputs=['h'], promotes_outputs=['rho'])

        self.add_subsystem('aerodynamics', subsys=AerodynamicsComp(num_nodes=nn),
                           promotes_inputs=['alpha', 'v', 'rho'],
                           promotes_outputs=['CL', 'CD', 'qbar', 'L', 'D'])

        self.add_subsystem('eom', subsys=FlightDynamicsComp(num_nodes=nn),
                           promotes_inputs=['h', 'theta', 'v', 'gamma', 'psi', 'beta', 'L', 'D'],
                           promotes_outputs=['g', 'h_dot', 'phi_dot', 'theta_dot', 'v_dot',
                                             'gamma_dot', 'psi_dot'])

        self.add_subsystem('heating', subsys=HeatingComp(num_nodes=nn),
                           promotes_inputs=['alpha', 'v', 'rho'],
                           promotes_outputs=['q_a', 'q_r', 'q'])

        self.set_input_defaults('h', val=np.ones(nn), units='ft')
        self.set_input_defaults('v', val=np.ones(nn), units='ft/s')
        self.set_input_defaults('alpha', val=np.zeros(nn), units='rad')
