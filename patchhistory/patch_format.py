# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from .log import PatchFormatError


# Sentinel to allow None as a value
Missing = object()


class PatchEntry(dict):
    """For internal usage in patchhistory library.

    Minimal class providing attribute access to patch entry keys.
    Keys follow the json-patch wire format, so the source path of
    move and copy operations is stored under "from" and is reached
    with ``entry["from"]`` or ``entry.from_``.
    """
    def __getattr__(self, name):
        if name.startswith("__") and name.endswith("__"):
            return self.__getattribute__(name)
        if name == "from_":
            name = "from"
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        if name == "from_":
            name = "from"
        self[name] = value


class PatchOp:
    "Collection of valid values for the op field in patch entries."
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


# Ops carrying a value, and ops carrying a source path
VALUE_OPS = (PatchOp.ADD, PatchOp.REPLACE, PatchOp.TEST)
FROM_OPS = (PatchOp.MOVE, PatchOp.COPY)
ALL_OPS = (
    PatchOp.ADD,
    PatchOp.REMOVE,
    PatchOp.REPLACE,
    PatchOp.MOVE,
    PatchOp.COPY,
    PatchOp.TEST,
    )


def op_add(path, value):
    "Create a patch entry to add value at path."
    return PatchEntry(op=PatchOp.ADD, path=path, value=value)

def op_remove(path):
    "Create a patch entry to remove the value at path."
    return PatchEntry(op=PatchOp.REMOVE, path=path)

def op_replace(path, value):
    "Create a patch entry to replace the value at path with given value."
    return PatchEntry(op=PatchOp.REPLACE, path=path, value=value)

def op_move(from_, path):
    "Create a patch entry moving the value at from_ to path."
    return PatchEntry({"op": PatchOp.MOVE, "from": from_, "path": path})

def op_copy(from_, path):
    "Create a patch entry copying the value at from_ to path."
    return PatchEntry({"op": PatchOp.COPY, "from": from_, "path": path})

def op_test(path, value):
    "Create a patch entry asserting that the value at path equals value."
    return PatchEntry(op=PatchOp.TEST, path=path, value=value)


class PatchBuilder(object):

    def __init__(self):
        self._patch = []

    def validated(self):
        return self._patch

    def append(self, entry):
        # Simplifies some algorithms
        if entry is None:
            return

        # Typechecking (just for internal consistency checking)
        assert isinstance(entry, PatchEntry)
        assert entry.op in ALL_OPS
        assert "path" in entry

        self._patch.append(entry)

    def add(self, path, value):
        self.append(op_add(path, value))

    def remove(self, path):
        self.append(op_remove(path))

    def replace(self, path, value):
        self.append(op_replace(path, value))


def to_patch_entries(ops):
    "Convert a list of plain dicts (e.g. loaded from json) to PatchEntry objects."
    return [PatchEntry(e) for e in ops]


def to_plain_dicts(ops):
    "Convert a list of PatchEntry objects to plain dicts."
    return [dict(e) for e in ops]


def is_valid_patch(ops):
    """Checks whether a patch (list of patch entries) is well formed.

    Returns a boolean indicating the well-formedness of the patch.
    """
    try:
        validate_patch(ops)
        result = True
    except PatchFormatError:
        result = False
    return result


def validate_patch(ops):
    """Check whether a patch (list of patch entries) is well formed.

    Raises a PatchFormatError if not well formed.
    """
    if not isinstance(ops, list):
        raise PatchFormatError("Patch must be a list.")
    for e in ops:
        validate_patch_entry(e)


def validate_patch_entry(e):
    """Check that e is a well formed patch entry.

    Raises a PatchFormatError if not well formed.
    """
    if not isinstance(e, dict):
        raise PatchFormatError("Patch entry '{}' is not a dict.".format(e))

    op = e.get("op")
    if op not in ALL_OPS:
        raise PatchFormatError("Unknown patch op '{}'.".format(op))

    if not isinstance(e.get("path"), str):
        raise PatchFormatError(
            "Patch entry path must be a string, not '{}'.".format(e.get("path")))
    if e["path"] and not e["path"].startswith("/"):
        raise PatchFormatError(
            "Patch entry path '{}' is not a json pointer.".format(e["path"]))

    if ("value" in e) != (op in VALUE_OPS):
        if op in VALUE_OPS:
            raise PatchFormatError("Patch op '{}' needs a value.".format(op))
        raise PatchFormatError("Patch op '{}' does not take a value.".format(op))

    if ("from" in e) != (op in FROM_OPS):
        if op in FROM_OPS:
            raise PatchFormatError("Patch op '{}' needs a from path.".format(op))
        raise PatchFormatError("Patch op '{}' does not take a from path.".format(op))

    if op in FROM_OPS and not isinstance(e["from"], str):
        raise PatchFormatError(
            "Patch entry from path must be a string, not '{}'.".format(e["from"]))
    if op in FROM_OPS and e["from"] and not e["from"].startswith("/"):
        raise PatchFormatError(
            "Patch entry from path '{}' is not a json pointer.".format(e["from"]))
