import numpy as np
import openmdao.api as om

from reentry._options import options as reentry_options


class AerodynamicsComp(om.ExplicitComponent):
    """
    Lift and drag of the shuttle.

    The lift and drag coefficients are polynomials in the angle of attack expressed in
    degrees.
    """
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._no_check_partials = not reentry_options['include_check_partials']

    def initialize(self):
        self.options.declare('num_nodes', types=int)
        self.options.declare('S', types=float, default=2690.0, desc='reference area (ft**2)')
        self.options.declare('a', types=tuple, default=(-0.20704, 0.029244),
                             desc='coefficients of the lift polynomial in alpha (deg)')
        self.options.declare('b', types=tuple, default=(0.07854, -0.61592E-2, 0.621408E-3),
                             desc='coefficients of the drag polynomial in alpha (deg)')

    def setup(self):
        nn = self.options['num_nodes']

        self.add_input('alpha', val=np.zeros(nn), desc='angle of attack', units='rad')
        self.add_input('v', val=np.ones(nn), desc='velocity', units='ft/s')
        self.add_input('rho', val=np.ones(nn), desc='local density', units='slug/ft**3')

        self.add_output('CL', val=np.ones(nn), desc='lift coefficient', units=None)
        self.add_output('CD', val=np.ones(nn), desc='drag coefficient', units=None)
        self.add_output('qbar', val=np.ones(nn), desc='dynamic pressure', units='lbf/ft**2')
        self.add_output('L', val=np.ones(nn), desc='lift', units='lbf')
        self.add_output('D', val=np.ones(nn), desc='drag', units='lbf')

        ar = np.arange(nn, dtype=int)

        self.declare_partials('CL', 'alpha', rows=ar, cols=ar, val=self.options['a'][1] * 180 / np.pi)
        self.declare_partials('CD', 'alpha', rows=ar, cols=ar)

        self.declare_partials('qbar', ['v', 'rho'], rows=ar, cols=ar)
        self.declare_partials('L', ['alpha', 'v', 'rho'], rows=ar, cols=ar)
        self.declare_partials('D', ['alpha', 'v', 'rho'], rows=ar, cols=ar)

    def compute(self, inputs, outputs):
        a0, a1 = self.options['a']
        b0, b1, b2 = self.options['b']
        S = self.options['S']

        alpha_hat = inputs['alpha'] * 180 / np.pi
        v = inputs['v']
        rho = inputs['rho']

        outputs['CL'] = CL = a0 + a1 * alpha_hat
        outputs['CD'] = CD = b0 + b1 * alpha_hat + b2 * alpha_hat ** 2
        outputs['qbar'] = qbar = 0.5 * rho * v ** 2
        outputs['L'] = qbar * S * CL
        outputs['D'] = qbar * S * CD

    def compute_partials(self, inputs, partials):
        a0, a1 = self.options['a']
        b0, b1, b2 = self.options['b']
        S = self.options['S']

        alpha_hat = inputs['alpha'] * 180 / np.pi
        v = inputs['v']
        rho = inputs['rho']

        CL = a0 + a1 * alpha_hat
        CD = b0 + b1 * alpha_hat + b2 * alpha_hat ** 2
        qbar = 0.5 * rho * v ** 2

        dCL_dalpha = a1 * 180 / np.pi
        dCD_dalpha = (b1 + 2 * b2 * alpha_hat) * 180 / np.pi

        partials['CD', 'alpha'] = dCD_dalpha

        partials['qbar', 'v'] = rho * v
        partials['qbar', 'rho'] = 0.5 * v ** 2

        partials['L', 'alpha'] = qbar * S * dCL_dalpha
        partials['L', 'v'] = rho * v * S * CL
        partials['L', 'rho'] = 0.5 * v ** 2 * S * CL

        partials['D', 'alpha'] = qbar * S * dCD_dalpha
        partials['D', 'v'] = rho * v * S * CD
        partials['D', 'rho'] = 0.5 * v ** 2 * S * CD
