def get_rate_units(units, time_units, deriv=1):
    """
    Return a string for rate units given units for the variable and time units.

    Parameters
    ----------
    units : str or None
        Units of the variable being differentiated.
    time_units : str or None
        Units of time.
    deriv : int
        The order of the derivative, 1 or 2.

    Returns
    -------
    str or None
        The rate units.
    """
    if deriv not in (1, 2):
        raise ValueError('deriv argument must be 1 or 2.')

    tu = time_units if deriv == 1 else f'{time_units}**2'

    if units is not None and time_units is not None:
        rate_units = f'{units}/{tu}'
    elif units is not None:
        rate_units = units
    elif time_units is not None:
        rate_units = f'1.0/{tu}'
    else:
        rate_units = None
    return rate_units
