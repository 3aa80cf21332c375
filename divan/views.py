import collections

from divan import exceptions


class ViewResult(object):
    """Result of view query; contains rows, offset, total_rows.
    Instances of this class are not supposed to be created by client software.

    A result for a conditional request that the server answered with
    ``304 Not Modified`` has no rows and ``not_modified`` set.
    """

    def __init__(self, rows, offset, total_rows, update_seq=None, etag=None, not_modified=False):
        self.rows = rows
        self.offset = offset
        self.total_rows = total_rows
        self.update_seq = update_seq
        self.etag = etag
        self.not_modified = not_modified

    def __len__(self):
        return len(self.rows)

    def __getitem__(self, i):
        return self.rows[i]

    def __iter__(self):
        return iter(self.rows)

    def __repr__(self):
        return '<%s %d rows>' % (type(self).__name__, len(self.rows))

    def json(self):
        "Return data in a JSON-like representation."
        result = dict()
        result["total_rows"] = self.total_rows
        result["offset"] = self.offset
        result["rows"] = [row.json() for row in self.rows]
        if self.update_seq is not None:
            result["update_seq"] = self.update_seq
        return result


class Row(collections.namedtuple("Row", ["id", "key", "value", "doc", "error"])):
    """A single view row.

    ``error`` is set for ``_all_docs`` lookups of keys that do not exist.
    """
    __slots__ = ()

    def json(self):
        result = {"key": self.key}
        for name in ("id", "value", "doc", "error"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


ListResult = collections.namedtuple("ListResult", ["text", "content_type", "etag"])


class BulkItem(collections.namedtuple("BulkItem", ["id", "rev", "error", "reason"])):
    """Outcome of one document in a bulk write.

    A success record has a ``rev``; an error record has ``error`` and
    ``reason`` instead.
    """
    __slots__ = ()

    @classmethod
    def from_json(cls, data):
        return cls(data.get("id"), data.get("rev"), data.get("error"), data.get("reason"))

    @property
    def ok(self):
        return self.error is None

    @property
    def conflict(self):
        return self.error == "conflict"

    def exception(self):
        """Return the exception matching this error record, or `None`."""
        if self.ok:
            return None
        if self.conflict:
            return exceptions.UpdateConflict(self.reason or self.error)
        return exceptions.CouchDBException(self.reason or self.error)

    def json(self):
        if self.ok:
            return {"id": self.id, "rev": self.rev}
        return {"id": self.id, "error": self.error, "reason": self.reason}
