from collections import namedtuple

from .util import fdiv


class Unit(namedtuple('Unit', 'value numerator denominator factor')):
    '''
    Number tagged with a unit.

    The unit is nothing more than a numerator label, a denominator label, and
    the factor converting value to the base unit it was declared against.
    Labels are only ever concatenated, never simplified; km * 1/km is still
    kmkm-ish, not unitless.
    '''

    __slots__ = ()

    def convert(self, other):
        '''
        Rescale self against other's unit.

        Returns (value, numerator, denominator); the caller picks the factor.
        Not a true conversion to base units: both factors are folded into the
        value, relative to other's value.
        '''
        if self.numerator == other.numerator:
            numerator = other.numerator
        else:
            numerator = other.numerator + self.numerator
        if self.denominator == other.denominator:
            denominator = self.denominator
        else:
            denominator = self.denominator + other.denominator
        factor = other.factor * self.factor
        return fdiv(self.value * factor, other.value), numerator, denominator

    def format(self, precision):
        return '{value:.{precision}f} {numerator}/{denominator}'.format(
            value=self.value,
            precision=precision,
            numerator=self.numerator,
            denominator=self.denominator,
        )
