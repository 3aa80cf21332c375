# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Bulk document writes.

>>> batch = BulkWrite(db)                                   #doctest: +SKIP
>>> batch.save({'_id': 'x', '_rev': '1-a', 'name': 'John Doe'})  #doctest: +SKIP
>>> batch.delete({'_id': 'y', '_rev': '2-b'})               #doctest: +SKIP
>>> result = batch.submit()                                 #doctest: +SKIP
>>> result['x'].ok, result['y'].error                       #doctest: +SKIP
(True, 'conflict')

A batch goes out as a single ``POST`` to ``_bulk_docs``. Unless
``all_or_nothing`` is requested every document succeeds or fails on its own,
so a mix of success and error records is a normal outcome and is returned,
not raised. Only a batch the server refuses as a whole raises
`exceptions.BatchRejected`.
"""

import logging

from divan import exceptions, request, response
from divan.serializer import DEFAULT_SERIALIZER

__all__ = ['BulkWrite', 'BulkResult', 'BUILT', 'SUBMITTED', 'ALL_SUCCEEDED',
           'PARTIALLY_FAILED', 'BATCH_REJECTED']

log = logging.getLogger(__name__)

BUILT = 'built'
SUBMITTED = 'submitted'
ALL_SUCCEEDED = 'all_succeeded'
PARTIALLY_FAILED = 'partially_failed'
BATCH_REJECTED = 'batch_rejected'


def _as_dict(doc):
    if isinstance(doc, dict):
        return doc
    elif hasattr(doc, 'items'):
        return dict(doc.items())
    raise TypeError('expected dict, got %s' % type(doc))


class BulkResult(object):
    """Per-document outcome of a bulk write, in the order the server sent it.

    Look records up by document ID rather than by the position of the
    document in the request.
    """

    def __init__(self, items):
        self.items = list(items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __contains__(self, id):
        return any(item.id == id for item in self.items)

    def __getitem__(self, id):
        item = self.get(id)
        if item is None:
            raise KeyError(id)
        return item

    def __repr__(self):
        return '<%s %d ok, %d failed>' % (type(self).__name__, len(self.succeeded), len(self.failed))

    def get(self, id, rev=None, default=None):
        """Return the record for a document ID, optionally matching a revision."""
        for item in self.items:
            if item.id == id and (rev is None or item.rev == rev):
                return item
        return default

    @property
    def succeeded(self):
        return [item for item in self.items if item.ok]

    @property
    def failed(self):
        return [item for item in self.items if not item.ok]

    @property
    def conflicts(self):
        return [item for item in self.items if item.conflict]

    @property
    def state(self):
        if self.failed:
            return PARTIALLY_FAILED
        return ALL_SUCCEEDED

    def json(self):
        return [item.json() for item in self.items]


class BulkWrite(object):
    """A batch of document creates, updates and deletes.

    :param database: the `Database` the batch is written to
    :param all_or_nothing: ask the server to apply all documents or none;
                           only the request changes, the outcome is whatever
                           the server reports
    :param new_edits: when `False`, store the given revisions as they are
                      (used by replication)
    """

    def __init__(self, database, all_or_nothing=False, new_edits=True, serializer=None):
        self.database = database
        self.all_or_nothing = all_or_nothing
        self.new_edits = new_edits
        self.serializer = serializer or getattr(database, 'serializer', DEFAULT_SERIALIZER)
        self.docs = []
        self.state = BUILT
        self.result = None

    def __len__(self):
        return len(self.docs)

    def __repr__(self):
        return '<%s %s %d docs>' % (type(self).__name__, self.state, len(self.docs))

    def _check_built(self):
        if self.state != BUILT:
            raise exceptions.CouchDBException("Batch was already submitted")

    def save(self, doc):
        """Add a document to create or update.

        Updates need the current ``_rev`` of the document; it is sent exactly
        as given.
        """
        self._check_built()
        self.docs.append(_as_dict(doc))
        return self

    def extend(self, docs):
        for doc in docs:
            self.save(doc)
        return self

    def delete(self, doc):
        """Add a deletion; `doc` needs ``_id`` and ``_rev``."""
        self._check_built()
        doc = _as_dict(doc)
        if not doc.get('_id') or not doc.get('_rev'):
            raise ValueError('deleting a document needs both _id and _rev')
        self.docs.append({'_id': doc['_id'], '_rev': doc['_rev'], '_deleted': True})
        return self

    def payload(self):
        payload = {'docs': self.docs}
        if self.all_or_nothing:
            payload['all_or_nothing'] = True
        if not self.new_edits:
            payload['new_edits'] = False
        return payload

    def build_request(self):
        """The ``POST`` for this batch.

        :raise EncodingError: if a document cannot be serialized
        """
        query = 'all_or_nothing=true' if self.all_or_nothing else None
        return request.build_json_request("POST", self.database.path.add("_bulk_docs"), self.payload(),
                                          query=query, serializer=self.serializer)

    def submit(self):
        """Send the batch.

        :return: a `BulkResult`
        :raise BatchRejected: if the server refused the whole batch
        :raise EncodingError: if a document cannot be serialized; nothing is
                              sent
        """
        self._check_built()
        req = self.build_request()
        self.state = SUBMITTED
        resp = self.database.server.session.send(req)
        try:
            items = response.decode_bulk(resp)
        except exceptions.BatchRejected:
            self.state = BATCH_REJECTED
            log.warning("Bulk write of %d documents to %s rejected with %d",
                        len(self.docs), self.database.name, resp.status_code)
            raise
        self.result = BulkResult(items)
        self.state = self.result.state
        if self.state == PARTIALLY_FAILED:
            log.info("Bulk write to %s: %d of %d documents failed",
                     self.database.name, len(self.result.failed), len(self.result))
        return self.result
