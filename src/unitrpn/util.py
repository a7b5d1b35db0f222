from functools import wraps
import math


class UnitRPNError(Exception):
    pass


class UnknownToken(UnitRPNError):
    pass


class StackUnderflow(UnitRPNError):
    pass


def wrap_user_errors(fmt):
    '''
    Ugly hack decorator that converts exceptions to user errors.

    Passes through UnitRPNErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except UnitRPNError:
                raise
            except Exception as e:
                raise UnitRPNError(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator


def fdiv(dividend, divisor):
    '''
    Divide floats the IEEE 754 way: x/0 is ±inf, 0/0 is nan.

    Python raises ZeroDivisionError instead.
    '''
    try:
        return dividend / divisor
    except ZeroDivisionError:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        # Signed zeroes matter: 1/-0.0 is -inf.
        return math.copysign(math.inf, dividend) * math.copysign(1, divisor)
