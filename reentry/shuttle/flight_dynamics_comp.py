import numpy as np
import openmdao.api as om

from reentry._options import options as reentry_options


class FlightDynamicsComp(om.ExplicitComponent):
    """
    Equations of motion of a point-mass vehicle gliding over a spherical, non-rotating Earth.

    Computes the rates of altitude, longitude, latitude, velocity, flight path angle, and
    azimuth given the lift and drag acting on the vehicle.

    References
    ----------
    .. [1] Betts, John T., Practical Methods for Optimal Control and Estimation Using Nonlinear
           Programming, p. 248, 2010.
    """
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._no_check_partials = not reentry_options['include_check_partials']

    def initialize(self):
        self.options.declare('num_nodes', types=int)
        self.options.declare('m', types=float, default=203000.0 / 32.174,
                             desc='vehicle mass (slug)')
        self.options.declare('mu', types=float, default=0.14076539E17,
                             desc='gravitational parameter of the Earth (ft**3/s**2)')
        self.options.declare('R_e', types=float, default=20902900.0,
                             desc='radius of the Earth (ft)')

    def setup(self):
        nn = self.options['num_nodes']

        self.add_input('h', val=np.ones(nn), desc='altitude', units='ft')
        self.add_input('theta', val=np.zeros(nn), desc='latitude', units='rad')
        self.add_input('v', val=np.ones(nn), desc='velocity', units='ft/s')
        self.add_input('gamma', val=np.zeros(nn), desc='flight path angle', units='rad')
        self.add_input('psi', val=np.zeros(nn), desc='azimuth', units='rad')
        self.add_input('beta', val=np.zeros(nn), desc='bank angle', units='rad')
        self.add_input('L', val=np.zeros(nn), desc='lift', units='lbf')
        self.add_input('D', val=np.zeros(nn), desc='drag', units='lbf')

        self.add_output('g', val=np.ones(nn), desc='local gravitational acceleration',
                        units='ft/s**2')
        self.add_output('h_dot', val=np.zeros(nn), desc='altitude rate', units='ft/s')
        self.add_output('phi_dot', val=np.zeros(nn), desc='longitude rate', units='rad/s')
        self.add_output('theta_dot', val=np.zeros(nn), desc='latitude rate', units='rad/s')
        self.add_output('v_dot', val=np.zeros(nn), desc='acceleration', units='ft/s**2')
        self.add_output('gamma_dot', val=np.zeros(nn), desc='flight path angle rate', units='rad/s')
        self.add_output('psi_dot', val=np.zeros(nn), desc='azimuth rate', units='rad/s')

        ar = np.arange(nn, dtype=int)

        self.declare_partials('g', 'h', rows=ar, cols=ar)
        self.declare_partials('h_dot', ['v', 'gamma'], rows=ar, cols=ar)
        self.declare_partials('phi_dot', ['h', 'theta', 'v', 'gamma', 'psi'], rows=ar, cols=ar)
        self.declare_partials('theta_dot', ['h', 'v', 'gamma', 'psi'], rows=ar, cols=ar)
        self.declare_partials('v_dot', 'D', rows=ar, cols=ar, val=-1.0 / self.options['m'])
        self.declare_partials('v_dot', ['h', 'gamma'], rows=ar, cols=ar)
        self.declare_partials('gamma_dot', ['h', 'v', 'gamma', 'beta', 'L'], rows=ar, cols=ar)
        self.declare_partials('psi_dot', ['h', 'theta', 'v', 'gamma', 'psi', 'beta', 'L'],
                              rows=ar, cols=ar)

    def compute(self, inputs, outputs):
        m = self.options['m']
        mu = self.options['mu']

        h = inputs['h']
        theta = inputs['theta']
        v = inputs['v']
        gamma = inputs['gamma']
        psi = inputs['psi']
        beta = inputs['beta']
        L = inputs['L']
        D = inputs['D']

        r = self.options['R_e'] + h
        g = mu / r ** 2

        sin_gamma = np.sin(gamma)
        cos_gamma = np.cos(gamma)
        sin_psi = np.sin(psi)
        cos_psi = np.cos(psi)
        sin_theta = np.sin(theta)
        cos_theta = np.cos(theta)
        sin_beta = np.sin(beta)
        cos_beta = np.cos(beta)

        outputs['g'] = g
        outputs['h_dot'] = v * sin_gamma
        outputs['phi_dot'] = (v / r) * cos_gamma * sin_psi / cos_theta
        outputs['theta_dot'] = (v / r) * cos_gamma * cos_psi
        outputs['v_dot'] = -D / m - g * sin_gamma
        outputs['gamma_dot'] = (L / (m * v)) * cos_beta + cos_gamma * (v / r - g / v)
        outputs['psi_dot'] = L * sin_beta / (m * v * cos_gamma) + \
            (v / (r * cos_theta)) * cos_gamma * sin_psi * sin_theta

    def compute_partials(self, inputs, partials):
        m = self.options['m']
        mu = self.options['mu']

        h = inputs['h']
        theta = inputs['theta']
        v = inputs['v']
        gamma = inputs['gamma']
        psi = inputs['psi']
        beta = inputs['beta']
        L = inputs['L']

        r = self.options['R_e'] + h
        g = mu / r ** 2
        dg_dh = -2 * mu / r ** 3

        sin_gamma = np.sin(gamma)
        cos_gamma = np.cos(gamma)
        sin_psi = np.sin(psi)
        cos_psi = np.cos(psi)
        sin_theta = np.sin(theta)
        cos_theta = np.cos(theta)
        sin_beta = np.sin(beta)
        cos_beta = np.cos(beta)

        partials['g', 'h'] = dg_dh

        partials['h_dot', 'v'] = sin_gamma
        partials['h_dot', 'gamma'] = v * cos_gamma

        partials['phi_dot', 'h'] = -(v / r ** 2) * cos_gamma * sin_psi / cos_theta
        partials['phi_dot', 'theta'] = (v / r) * cos_gamma * sin_psi * sin_theta / cos_theta ** 2
        partials['phi_dot', 'v'] = cos_gamma * sin_psi / (r * cos_theta)
        partials['phi_dot', 'gamma'] = -(v / r) * sin_gamma * sin_psi / cos_theta
        partials['phi_dot', 'psi'] = (v / r) * cos_gamma * cos_psi / cos_theta

        partials['theta_dot', 'h'] = -(v / r ** 2) * cos_gamma * cos_psi
        partials['theta_dot', 'v'] = cos_gamma * cos_psi / r
        partials['theta_dot', 'gamma'] = -(v / r) * sin_gamma * cos_psi
        partials['theta_dot', 'psi'] = -(v / r) * cos_gamma * sin_psi

        partials['v_dot', 'h'] = -dg_dh * sin_gamma
        partials['v_dot', 'gamma'] = -g * cos_gamma

        partials['gamma_dot', 'h'] = cos_gamma * (-v / r ** 2 - dg_dh / v)
        partials['gamma_dot', 'v'] = -L * cos_beta / (m * v ** 2) + cos_gamma * (1 / r + g / v ** 2)
        partials['gamma_dot', 'gamma'] = -sin_gamma * (v / r - g / v)
        partials['gamma_dot', 'beta'] = -(L / (m * v)) * sin_beta
        partials['gamma_dot', 'L'] = cos_beta / (m * v)

        partials['psi_dot', 'h'] = -(v / (r ** 2 * cos_theta)) * cos_gamma * sin_psi * sin_theta
        partials['psi_dot', 'theta'] = (v / r) * cos_gamma * sin_psi / cos_theta ** 2
        partials['psi_dot', 'v'] = -L * sin_beta / (m * v ** 2 * cos_gamma) + \
            cos_gamma * sin_psi * sin_theta / (r * cos_theta)
        partials['psi_dot', 'gamma'] = L * sin_beta * sin_gamma / (m * v * cos_gamma ** 2) - \
            (v / (r * cos_theta)) * sin_gamma * sin_psi * sin_theta
        partials['psi_dot', 'psi'] = (v / (r * cos_theta)) * cos_gamma * cos_psi * sin_theta
        partials['psi_dot', 'beta'] = L * cos_beta / (m * v * cos_gamma)
        partials['psi_dot', 'L'] = sin_beta / (m * v * cos_gamma)
