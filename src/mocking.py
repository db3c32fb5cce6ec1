"""
Call Recording Test Doubles

Stand-ins for the local kernel's collaborators that return fixed values and
log every call. After running the routine under test, the log shows which
collaborators were called, in what order and with which arguments.

Arguments are deep-copied when recorded. The kernel passes views into the
live population array and then updates that array in place; without the
copy the log would show post-update values.
"""

import copy


class CallRecorder:
    """
    Append-only log of ``(name, args)`` records.

    Call :meth:`reset` before each independent scenario.
    """

    def __init__(self):
        self.calls = []

    def record(self, name, *args):
        self.calls.append((name, copy.deepcopy(args)))

    def reset(self):
        self.calls.clear()

    def names(self):
        """Recorded operation names, in call order."""
        return [name for name, _ in self.calls]

    def args_of(self, name):
        """Argument tuples of every call to ``name``, in call order."""
        return [args for recorded, args in self.calls if recorded == name]

    def __len__(self):
        return len(self.calls)

    def __iter__(self):
        return iter(self.calls)


def recording_stub(recorder, name, return_value=None):
    """
    Function that records its call under ``name`` and returns ``return_value``.

    Parameters
    ----------
    recorder : CallRecorder
        Log to append to
    name : str
        Operation name used in the log
    return_value : object, optional
        Value returned on every call
    """
    def stub(*args):
        recorder.record(name, *args)
        return return_value

    stub.__name__ = name
    return stub


class RecordingLattice:
    """
    Lattice stand-in whose collaborator calls are recorded.

    ``equilibrium`` returns a fixed value; ``len`` and ``neighbor`` delegate
    to a real lattice so the kernel sees consistent geometry.

    Parameters
    ----------
    recorder : CallRecorder
        Log to append to
    lattice : D2Q9Lattice
        Geometry to delegate to
    equilibrium : object
        Value returned by :meth:`equilibrium`
    """

    def __init__(self, recorder, lattice, equilibrium=None):
        self.recorder = recorder
        self.lattice = lattice
        self.equilibrium_value = equilibrium

    def equilibrium(self, populations):
        self.recorder.record("equilibrium", populations)
        return self.equilibrium_value

    def __len__(self):
        self.recorder.record("len")
        return len(self.lattice)

    def neighbor(self, site, direction):
        self.recorder.record("neighbor", site, direction)
        return self.lattice.neighbor(site, direction)
