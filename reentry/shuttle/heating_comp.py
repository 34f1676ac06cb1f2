import numpy as np
import openmdao.api as om

from reentry._options import options as reentry_options


class HeatingComp(om.ExplicitComponent):
    """
    Aerodynamic heating rate on the wing leading edge of the shuttle.

    The heating rate is the product of a radiative-equilibrium term driven by density and
    velocity and an angle-of-attack correction polynomial in alpha (deg).
    """
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._no_check_partials = not reentry_options['include_check_partials']

    def initialize(self):
        self.options.declare('num_nodes', types=int)
        self.options.declare('c', types=tuple,
                             default=(1.0672181, -0.19213774E-1, 0.21286289E-3, -0.10117249E-5),
                             desc='coefficients of the heating polynomial in alpha (deg)')

    def setup(self):
        nn = self.options['num_nodes']

        self.add_input('alpha', val=np.zeros(nn), desc='angle of attack', units='rad')
        self.add_input('v', val=np.ones(nn), desc='velocity', units='ft/s')
        self.add_input('rho', val=np.ones(nn), desc='local density', units='slug/ft**3')

        self.add_output('q_a', val=np.ones(nn), desc='angle of attack heating factor', units=None)
        self.add_output('q_r', val=np.ones(nn), desc='reference heating rate',
                        units='Btu/(ft**2*s)')
        self.add_output('q', val=np.ones(nn), desc='wing leading edge heating rate',
                        units='Btu/(ft**2*s)')

        ar = np.arange(nn, dtype=int)

        self.declare_partials('q_a', 'alpha', rows=ar, cols=ar)
        self.declare_partials('q_r', ['v', 'rho'], rows=ar, cols=ar)
        self.declare_partials('q', ['alpha', 'v', 'rho'], rows=ar, cols=ar)

    def compute(self, inputs, outputs):
        c0, c1, c2, c3 = self.options['c']

        alpha_hat = inputs['alpha'] * 180 / np.pi
        v = inputs['v']
        rho = inputs['rho']

        outputs['q_a'] = q_a = c0 + c1 * alpha_hat + c2 * alpha_hat ** 2 + c3 * alpha_hat ** 3
        outputs['q_r'] = q_r = 17700 * np.sqrt(rho) * (0.0001 * v) ** 3.07
        outputs['q'] = q_a * q_r

    def compute_partials(self, inputs, partials):
        c0, c1, c2, c3 = self.options['c']

        alpha_hat = inputs['alpha'] * 180 / np.pi
        v = inputs['v']
        rho = inputs['rho']

        q_a = c0 + c1 * alpha_hat + c2 * alpha_hat ** 2 + c3 * alpha_hat ** 3
        q_r = 17700 * np.sqrt(rho) * (0.0001 * v) ** 3.07

        dqa_dalpha = (c1 + 2 * c2 * alpha_hat + 3 * c3 * alpha_hat ** 2) * 180 / np.pi
        dqr_dv = 17700 * np.sqrt(rho) * 3.07 * (0.0001 * v) ** 2.07 * 0.0001
        dqr_drho = 0.5 * 17700 / np.sqrt(rho) * (0.0001 * v) ** 3.07

        partials['q_a', 'alpha'] = dqa_dalpha
        partials['q_r', 'v'] = dqr_dv
        partials['q_r', 'rho'] = dqr_drho

        partials['q', 'alpha'] = dqa_dalpha * q_r
        partials['q', 'v'] = q_a * dqr_dv
        partials['q', 'rho'] = q_a * dqr_drho
