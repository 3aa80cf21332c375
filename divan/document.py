# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

__all__ = ['Document', 'SecurityDocument']


class Document(dict):
    """Representation of a document in the database.

    This is basically just a dictionary with the two additional properties
    `id` and `rev`, which contain the document ID and revision, respectively.
    """

    def __repr__(self):
        return '<%s %r@%r %r>' % (type(self).__name__, self.id, self.rev,
                                  dict([(k, v) for k, v in self.items()
                                        if k not in ('_id', '_rev')]))

    @property
    def id(self):
        """The document ID.

        :rtype: str
        """
        return self.get('_id')

    @property
    def rev(self):
        """The document revision.

        :rtype: str
        """
        return self.get('_rev')

    @property
    def deleted(self):
        return bool(self.get('_deleted'))


def _names_and_roles(data):
    data = data or {}
    return {
        'names': list(data.get('names', [])),
        'roles': list(data.get('roles', [])),
    }


class SecurityDocument(object):
    """The ``_security`` object of a database.

    >>> sec = SecurityDocument()
    >>> sec.readers['names'].append('dave')
    >>> sec.json()
    {'admins': {'names': [], 'roles': []}, 'readers': {'names': ['dave'], 'roles': []}}
    """

    def __init__(self, admins=None, readers=None, cloudant=None):
        self.admins = _names_and_roles(admins)
        self.readers = _names_and_roles(readers)
        self.cloudant = cloudant

    @classmethod
    def from_json(cls, data):
        # CouchDB 1.x still answers with the older "members" name
        readers = data.get('readers', data.get('members'))
        return cls(admins=data.get('admins'), readers=readers, cloudant=data.get('cloudant'))

    def add_cloudant(self):
        """Grant the unauthenticated ``nobody`` user full Cloudant access."""
        self.cloudant = {'nobody': ['_reader', '_writer', '_admin']}

    def json(self):
        "Return data in a JSON-like representation."
        result = {'admins': self.admins, 'readers': self.readers}
        if self.cloudant is not None:
            result['cloudant'] = self.cloudant
        return result

    def __eq__(self, other):
        if not isinstance(other, SecurityDocument):
            return NotImplemented
        return self.json() == other.json()

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.json())
