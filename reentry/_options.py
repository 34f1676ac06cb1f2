import openmdao.api as om

options = om.OptionsDictionary()

options.declare('include_check_partials', default=False, types=bool,
                desc='If True, include reentry components when checking partials.')

options.declare('solution_record_file', default='reentry_solution.db', types=str,
                desc='Default name of the case database written by run_problem.')
