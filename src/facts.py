"""
Fact Sheet

Collects checks run in a tour cell and reports how many passed, e.g.
``"4 facts verified."``. A failing check raises immediately with the
expected and actual values.
"""

import numpy as np


class FactSheet:
    """
    Counter of verified facts for one group of checks.

    Parameters
    ----------
    title : str, optional
        Heading printed by :meth:`report`
    """

    def __init__(self, title=None):
        self.title = title
        self.verified = 0

    def check(self, actual, expected, description="", rtol=0.0, atol=0.0):
        """
        Verify that ``actual`` equals ``expected`` (within tolerance).

        Raises
        ------
        AssertionError
            If the values differ; the message shows both
        """
        np.testing.assert_allclose(
            actual, expected, rtol=rtol, atol=atol, err_msg=description
        )
        self.verified += 1

    def check_true(self, condition, description=""):
        if not condition:
            raise AssertionError(f"fact does not hold: {description}")
        self.verified += 1

    def summary(self):
        return f"{self.verified} facts verified."

    def report(self):
        """Print and return the summary line."""
        if self.title:
            print(self.title)
        line = self.summary()
        print(line)
        return line
