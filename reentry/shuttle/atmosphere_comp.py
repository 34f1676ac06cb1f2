import numpy as np
import openmdao.api as om

from reentry._options import options as reentry_options


class AtmosphereComp(om.ExplicitComponent):
    """
    Exponential atmosphere, rho = rho_0 * exp(-h / h_r).

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
        self.options.declare('rho_0', types=float, default=0.002378,
                             desc='density at sea level (slug/ft**3)')
        self.options.declare('h_r', types=float, default=23800.0,
                             desc='density scale height (ft)')

    def setup(self):
        nn = self.options['num_nodes']
        ar = np.arange(nn, dtype=int)

        self.add_input('h', val=np.zeros(nn), desc='altitude', units='ft')

        self.add_output('rho', val=self.options['rho_0'] * np.ones(nn), desc='local density',
                        units='slug/ft**3')

        self.declare_partials(of='rho', wrt='h', rows=ar, cols=ar)

    def compute(self, inputs, outputs):
        outputs['rho'] = self.options['rho_0'] * np.exp(-inputs['h'] / self.options['h_r'])

    def compute_partials(self, inputs, partials):
        h_r = self.options['h_r']
        partials['rho', 'h'] = -self.options['rho_0'] / h_r * np.exp(-inputs['h'] / h_r)
