import io
import os
import pathlib
import unittest

import numpy as np
import openmdao.api as om
from openmdao.utils.assert_utils import assert_near_equal
from openmdao.utils.testing_utils import use_tempdirs, require_pyoptsparse

import reentry
from reentry.run_problem import run_problem, load_case, read_case, get_solution_record_path
from reentry.shuttle.shuttle_reentry import shuttle_reentry_problem, crossrange_summary, \
    _parse_args


class TestShuttleReentryFormulation(unittest.TestCase):

    def setUp(self):
        self.nn = 21
        self.p = shuttle_reentry_problem(num_nodes=self.nn, optimizer='SLSQP',
                                         declare_coloring=False)
        self.p.final_setup()

    def test_initial_guess(self):
        p = self.p
        nn = self.nn

        p.run_model()

        assert_near_equal(p.get_val('phase0.time'), np.arange(nn, dtype=float),
                          tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.states:h', units='ft'),
                          np.linspace(260000.0, 80000.0, nn), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.states:v', units='ft/s'),
                          np.linspace(25600.0, 2500.0, nn), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.states:gamma', units='deg'),
                          np.linspace(-1.0, -5.0, nn), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.states:psi', units='deg'), 90.0 * np.ones(nn),
                          tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.states:theta'), np.zeros(nn))
        assert_near_equal(p.get_val('phase0.controls:alpha'), np.zeros(nn))

    def test_design_vars(self):
        nn = self.nn
        dvs = self.p.model.get_design_vars(use_prom_ivc=False)

        # Both ends of h, v, and gamma are fixed by the boundary conditions.
        for name in ('h', 'v', 'gamma'):
            assert_near_equal(dvs[f'phase0.indep_vars.states:{name}']['indices'].as_array(),
                              np.arange(1, nn - 1))

        for name in ('phi', 'theta', 'psi'):
            assert_near_equal(dvs[f'phase0.indep_vars.states:{name}']['indices'].as_array(),
                              np.arange(1, nn))

        for name in ('alpha', 'beta'):
            assert_near_equal(dvs[f'phase0.indep_vars.controls:{name}']['indices'].as_array(),
                              np.arange(nn - 1))

        self.assertNotIn('phase0.indep_vars.dt', dvs)

    def test_objective_maximizes_final_latitude(self):
        objs = self.p.model.get_objectives()

        self.assertEqual(len(objs), 1)
        obj = list(objs.values())[0]
        self.assertEqual(obj['source'], 'phase0.indep_vars.states:theta')
        assert_near_equal(obj['indices'].as_array(), [self.nn - 1])
        assert_near_equal(obj['scaler'], -1.0)

    def test_step_defects(self):
        cons = self.p.model.get_constraints()

        for name in ('h', 'phi', 'theta', 'v', 'gamma', 'psi'):
            self.assertIn(f'phase0.collocation_constraint.step_defects:{name}', cons)

        assert_near_equal(cons['phase0.collocation_constraint.step_defects:h']['scaler'], 1.0E-5)
        assert_near_equal(cons['phase0.collocation_constraint.step_defects:v']['scaler'], 1.0E-4)

    def test_summary(self):
        p = self.p
        p.run_model()

        s = io.StringIO()
        summary = crossrange_summary(p, out_stream=s)

        assert_near_equal(summary['theta_f'], 0.0)
        assert_near_equal(summary['time_f'], self.nn - 1.0)
        assert_near_equal(summary['q_max'],
                          np.max(p.get_val('phase0.rhs.q', units='Btu/(ft**2*s)')))
        self.assertIn('Final latitude theta = 0.00 deg', s.getvalue())
        self.assertIn('Final time = 20.00 s', s.getvalue())


class TestShuttleReentryOptions(unittest.TestCase):

    def test_free_dt_trapezoidal(self):
        nn = 11
        p = shuttle_reentry_problem(num_nodes=nn, integration='trapezoidal', optimizer='SLSQP',
                                    fix_dt=False, declare_coloring=False)
        p.final_setup()

        dvs = p.model.get_design_vars(use_prom_ivc=False)

        assert_near_equal(dvs['phase0.indep_vars.dt']['lower'], 0.5)
        assert_near_equal(dvs['phase0.indep_vars.dt']['upper'], 1.5)
        assert_near_equal(dvs['phase0.indep_vars.controls:alpha']['indices'].as_array(),
                          np.arange(nn))

    def test_heating_limit(self):
        p = shuttle_reentry_problem(num_nodes=11, optimizer='SLSQP', heating_limit=70.0,
                                    declare_coloring=False)
        p.final_setup()

        cons = p.model.get_constraints()

        self.assertIn('phase0.rhs.q', cons)
        assert_near_equal(cons['phase0.rhs.q']['upper'], 1.0)

    def test_invalid_integration(self):
        with self.assertRaises(ValueError):
            shuttle_reentry_problem(num_nodes=11, integration='simpson', optimizer='SLSQP')

    def test_parse_args(self):
        args = _parse_args([])

        self.assertEqual(args.num_nodes, 2009)
        self.assertEqual(args.integration, 'rectangular')
        self.assertEqual(args.optimizer, 'IPOPT')
        self.assertEqual(args.linear_solver, 'mumps')
        self.assertFalse(args.free_dt)
        self.assertIsNone(args.heating_limit)
        self.assertIsNone(args.restart)

        args = _parse_args(['--num-nodes', '101', '--integration', 'trapezoidal', '--free-dt',
                            '--heating-limit', '70'])

        self.assertEqual(args.num_nodes, 101)
        self.assertEqual(args.integration, 'trapezoidal')
        self.assertTrue(args.free_dt)
        self.assertEqual(args.heating_limit, 70.0)


@use_tempdirs
class TestRunProblem(unittest.TestCase):

    def _record_solution(self, nn, filename):
        p = shuttle_reentry_problem(num_nodes=nn, optimizer='SLSQP', declare_coloring=False)
        p.set_val('phase0.states:theta', np.linspace(0.0, 30.0, nn), units='deg')

        run_problem(p, run_driver=False, solution_record_file=filename)

        return get_solution_record_path(p, filename)

    def test_record_and_restart(self):
        nn = 11
        path = self._record_solution(nn, 'shuttle_solution.db')

        # The database is written to the outputs directory of the problem.
        self.assertTrue(path.exists())
        self.assertEqual(path.name, 'shuttle_solution.db')

        p2 = shuttle_reentry_problem(num_nodes=nn, optimizer='SLSQP', declare_coloring=False)
        run_problem(p2, run_driver=False, restart=path, solution_record_file='shuttle_restart.db')

        assert_near_equal(p2.get_val('phase0.states:theta', units='deg'),
                          np.linspace(0.0, 30.0, nn), tolerance=1.0E-12)
        self.assertTrue(get_solution_record_path(p2, 'shuttle_restart.db').exists())

    def test_restart_from_record_file(self):
        nn = 11
        path = self._record_solution(nn, 'shuttle_solution.db')

        # Recording over the restart database must not lose the restart case.
        p2 = shuttle_reentry_problem(num_nodes=nn, optimizer='SLSQP', declare_coloring=False)
        run_problem(p2, run_driver=False, restart=path, solution_record_file=str(path))

        assert_near_equal(p2.get_val('phase0.states:theta', units='deg'),
                          np.linspace(0.0, 30.0, nn), tolerance=1.0E-12)

        case = read_case(path)
        assert_near_equal(case.get_val('phase0.states:theta', units='deg'),
                          np.linspace(0.0, 30.0, nn), tolerance=1.0E-12)

    def test_default_record_path(self):
        p = shuttle_reentry_problem(num_nodes=11, optimizer='SLSQP', declare_coloring=False)
        p.final_setup()

        path = get_solution_record_path(p)

        self.assertEqual(path.name, reentry.options['solution_record_file'])
        self.assertEqual(path.parent, pathlib.Path(p.get_outputs_dir()))
        self.assertEqual(get_solution_record_path(p, os.path.abspath('sol.db')),
                         pathlib.Path(os.path.abspath('sol.db')))

    def test_restart_missing_file(self):
        p = shuttle_reentry_problem(num_nodes=11, optimizer='SLSQP', declare_coloring=False)
        p.final_setup()

        with self.assertRaises(FileNotFoundError):
            load_case(p, 'no_such_file.db')

    def test_restart_without_problem_cases(self):
        p = om.Problem()
        p.model.add_subsystem('comp', om.ExecComp('y = 2.0 * x'), promotes=['*'])
        p.model.add_design_var('x', lower=0.0, upper=1.0)
        p.model.add_objective('y')
        p.driver.add_recorder(om.SqliteRecorder('driver_cases.db'))
        p.setup()
        p.run_driver()
        p.cleanup()

        path = get_solution_record_path(p, 'driver_cases.db')
        self.assertTrue(path.exists())

        with self.assertRaises(ValueError) as e:
            load_case(p, path)
        self.assertIn('no problem cases were recorded', str(e.exception))


@use_tempdirs
class TestShuttleReentryMaxCrossrange(unittest.TestCase):

    @require_pyoptsparse(optimizer='IPOPT')
    def test_max_crossrange_rectangular(self):
        p = shuttle_reentry_problem(num_nodes=2009, integration='rectangular', optimizer='IPOPT',
                                    print_level=0)

        run_problem(p, run_driver=True)
        self.assertTrue(p.driver.result.success)

        summary = crossrange_summary(p, out_stream=None)

        # Published crossrange with free final time is 34.1412 deg at t_f = 2008.59 s.
        assert_near_equal(summary['theta_f'], 34.1412, tolerance=0.02)
        assert_near_equal(p.get_val('phase0.states:h', units='ft')[-1], 80000.0, tolerance=1.0E-9)
        assert_near_equal(p.get_val('phase0.states:v', units='ft/s')[-1], 2500.0, tolerance=1.0E-9)
        assert_near_equal(p.get_val('phase0.states:gamma', units='deg')[-1], -5.0,
                          tolerance=1.0E-9)


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
