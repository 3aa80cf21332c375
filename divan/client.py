# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Python client API for CouchDB.

>>> server = Server()
>>> db = server.create('python-tests')
>>> doc_id, doc_rev = db.save({'type': 'Person', 'name': 'John Doe'})
>>> doc = db[doc_id]
>>> doc['type']
'Person'
>>> doc['name']
'John Doe'
>>> del db[doc.id]
>>> doc.id in db
False

>>> del server['python-tests']
"""

import logging
import mimetypes
import os
from urllib.parse import quote

import furl

from divan import bulk, exceptions, request, response
from divan.config import ClientConfig, DEFAULT_BASE_URL
from divan.document import Document, SecurityDocument
from divan.options import DEFAULT_MAX_URL_LENGTH, ViewOptions
from divan.serializer import DEFAULT_SERIALIZER
from divan.session import Session
from divan.views import ListResult
from divan import auth as credentials

__all__ = ['Server', 'Database', 'Attachment']
__docformat__ = 'restructuredtext en'

log = logging.getLogger(__name__)

BIN_MIME = "application/octet-stream"
CHUNK_SIZE = 64 * 1024


class Server(object):
    """Representation of a CouchDB server.

    >>> server = Server() # connects to the local_server
    >>> remote_server = Server('http://example.com:5984/')
    >>> secure_remote_server = Server.from_config(ClientConfig(
    ...     'https://example.com:5984/', username='admin', password='secret'))

    This class behaves like a dictionary of databases. For example, to get a
    list of database names on the server, you can simply iterate over the
    server object.

    New databases can be created using the `create` method:

    >>> db = server.create('python-tests')
    >>> db
    <Database 'python-tests'>

    You can access existing databases using item access, specifying the database
    name as the key:

    >>> db = server['python-tests']
    >>> db.name
    'python-tests'

    Databases can be deleted using a ``del`` statement:

    >>> del server['python-tests']
    """

    def __init__(self, url=DEFAULT_BASE_URL, session=None, max_url_length=DEFAULT_MAX_URL_LENGTH):
        """Initialize the server object.

        :param url: the URI of the server (for example ``http://localhost:5984/``)
        :param session: the `Session` to send requests with
        :param max_url_length: longest URL a view query may use before its
                               keys are posted in the request body instead
        """
        self._url = url
        if session:
            self._session = session
            self._session.base_url = url
        else:
            self._session = Session(base_url=self._url)
        self.max_url_length = max_url_length
        self._version_info = None

    @classmethod
    def from_config(cls, config=None, transport=None):
        """Create a server from a `ClientConfig`, read from the environment
        when not given.

        Cookie authentication logs in right away.
        """
        if config is None:
            config = ClientConfig.from_env()
        provider = config.credentials()
        session = Session(config.url, auth=provider, timeout=config.timeout, transport=transport)
        server = cls(config.url, session=session, max_url_length=config.max_url_length)
        if isinstance(provider, credentials.CookieAuth):
            provider.login(session)
        return server

    @property
    def url(self):
        return self._url

    @property
    def session(self):
        return self._session

    def __contains__(self, name):
        """Return whether the server contains a database with the specified
        name.

        :param name: the database name
        :return: `True` if a database with the name exists, `False` otherwise
        """
        try:
            self._session.head(_quote(name))
            return True
        except exceptions.HTTPNotFound:
            return False

    def __iter__(self):
        """Iterate over the names of all databases.

        ``list(server)`` also calls `__len__`, which costs a second request.
        """
        return iter(self._session.get('_all_dbs').json())

    def __len__(self):
        """Return the number of databases."""
        return len(self._session.get('_all_dbs').json())

    def __bool__(self):
        """Return whether the server is available."""
        try:
            self._session.head("")
            return True
        except exceptions.RequestsException:
            return False

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.url)

    def __delitem__(self, name):
        """Remove the database with the specified name.

        :param name: the name of the database
        :raise MissingDatabase: if no database with that name exists
        """
        try:
            self._session.delete(_quote(name))
        except exceptions.HTTPNotFound as exc:
            raise exceptions.MissingDatabase("Database does not exist") from exc

    def __getitem__(self, name):
        """Return a `Database` object representing the database with the
        specified name.

        :param name: the name of the database
        :return: a `Database` object representing the database
        :rtype: `Database`
        :raise MissingDatabase: if no database with that name exists
        """
        return Database(self, name, check=True)

    def database(self, name, check=False, serializer=DEFAULT_SERIALIZER):
        """Return a `Database` without checking that it exists first."""
        return Database(self, name, check=check, serializer=serializer)

    def version(self):
        """The version string of the CouchDB server.

        Note that this results in a request being made, and can also be used
        to check for the availability of the server.

        :rtype: `str`"""
        return self._session.get("").json()['version']

    def version_info(self):
        """The version of the CouchDB server as a tuple of ints.

        Note that this results in a request being made only at the first call.
        Afterwards the result will be cached.

        :rtype: `tuple(int, int, int)`"""
        if self._version_info is None:
            version = self.version()
            self._version_info = tuple(map(int, version.split('.')))
        return self._version_info

    def stats(self, name=None, node="_local"):
        """Server statistics.

        :param name: name of single statistic, e.g. httpd/requests
                     (None -- return all statistics)
        :param node: node for which to return statistics
        """
        path = furl.Path(['_node', node, '_stats'])
        if name:
            path.add(name)
        return self._session.get(str(path)).json()

    def tasks(self):
        """A list of tasks currently active on the server."""
        return self._session.get("_active_tasks").json()

    def uuids(self, count=1):
        """Retrieve a batch of uuids

        :param count: a number of uuids to fetch
        :return: a list of uuids
        """
        data = self._session.get("_uuids", params={'count': count}).json()
        return data['uuids']

    def create(self, name):
        """Create a new database with the given name.

        :param name: the name of the database
        :return: a `Database` object representing the created database
        :rtype: `Database`
        :raise DatabaseExists: if a database with that name already exists
        """
        try:
            self._session.put(_quote(name))
        except exceptions.HTTPPreconditionFailed as exc:
            raise exceptions.DatabaseExists("Database already exists") from exc
        return Database(self, name, check=False)

    def delete(self, name):
        """Delete the database with the specified name.

        :param name: the name of the database
        :raise MissingDatabase: if a database with that name does not exist
        """
        del self[name]

    def replicate(self, source, target, **options):
        """Replicate changes from the source database to the target database.

        :param source: URL of the source database
        :param target: URL of the target database
        :param options: optional replication args, e.g. continuous=True
        """
        # CouchDB requires full URLs for source and target even on the same server,
        # if we don't get a netloc we assume it's only a database name
        if not furl.furl(source).netloc:
            source = furl.furl(self.url).set(path=[source]).url
        if not furl.furl(target).netloc:
            target = furl.furl(self.url).set(path=[target]).url
        data = {'source': source, 'target': target}
        data.update(options)
        return self._session.post("_replicate", json=data).json()

    def login(self, name, password):
        """Log in with cookie authentication.

        Every later request of this server's session carries the session
        cookie.

        :raise LoginFailed: if the server refuses the credentials
        """
        provider = credentials.CookieAuth(name, password)
        data = provider.login(self._session)
        self._session.auth = provider
        return data

    def logout(self):
        """Log out a cookie authenticated session."""
        provider = self._session.auth
        if isinstance(provider, credentials.CookieAuth):
            provider.logout(self._session)
        else:
            self._session.delete("_session")
        self._session.auth = None

    def session_info(self):
        """Information about the current user and authentication method."""
        return self._session.get("_session").json()


class Database(object):
    """Representation of a database on a CouchDB server.

    >>> server = Server()
    >>> db = server.create('python-tests')

    New documents can be added to the database using the `save()` method:

    >>> doc_id, doc_rev = db.save({'type': 'Person', 'name': 'John Doe'})

    This class provides a dictionary-like interface to databases: documents are
    retrieved by their ID using item access

    >>> doc = db[doc_id]
    >>> doc                 #doctest: +ELLIPSIS
    <Document '...'@... {...}>

    Documents are represented as instances of the `Document` class, which is
    basically just a normal dictionary with the additional attributes ``id`` and
    ``rev``:

    >>> doc.id, doc.rev     #doctest: +ELLIPSIS
    ('...', ...)

    Views are always queried with an explicit design document:

    >>> db.view('people/by_name', ViewOptions(startkey='J', limit=10))  #doctest: +SKIP
    <ViewResult 1 rows>

    >>> del server['python-tests']
    """

    def __init__(self, server, name, check=True, serializer=DEFAULT_SERIALIZER):
        self._name = name
        self._server = server
        self.serializer = serializer
        if check:
            self.check()

    @property
    def name(self):
        return self._name

    @property
    def server(self):
        return self._server

    @property
    def session(self):
        return self._server.session

    @property
    def path(self):
        return furl.Path(_quote(self.name))

    def exists(self):
        try:
            self.session.head(self.path)
        except exceptions.HTTPNotFound:
            return False
        return True

    def check(self):
        if not self.exists():
            raise exceptions.MissingDatabase("Database does not exist")

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.name)

    def __contains__(self, id):
        """Return whether the database contains a document with the specified
        ID.

        :param id: the document ID
        :return: `True` if a document with the ID exists, `False` otherwise
        """
        try:
            self.session.head(self.path.add([id]))
        except exceptions.HTTPNotFound:
            return False
        return True

    def __iter__(self):
        """Return the IDs of all documents in the database.

        ``list(db)`` also calls `__len__`, which costs a second request.
        """
        result = self.all_docs()
        if result is None:
            raise exceptions.MissingDatabase("Database does not exist")
        return iter([row.id for row in result])

    def __len__(self):
        """Return the number of documents in the database."""
        try:
            return self.session.get(self.path).json()['doc_count']
        except exceptions.HTTPNotFound as exc:
            raise exceptions.MissingDatabase("Database does not exist") from exc

    def __bool__(self):
        """Return whether the database is available."""
        return self.exists()

    def __delitem__(self, id):
        """Remove the document with the specified ID from the database.

        :param id: the document ID
        """
        resp = self.session.head(self.path.add([id]))
        rev = resp.headers['ETag'].strip('"')
        return self.delete(id, rev)

    def __getitem__(self, id):
        """Return the document with the specified ID.

        :param id: the document ID
        :return: a `Document` object representing the requested document
        :rtype: `Document`
        :raise MissingDocument: if no document with the ID exists
        """
        doc = self.get(id)
        if doc is None:
            raise exceptions.MissingDocument("Document does not exist")
        return doc

    def __setitem__(self, id, content):
        """Create or update a document with the specified ID.

        :param id: the document ID
        :param content: the document content; a document that exists already
                        needs its current ``_rev``
        """
        req = request.build_json_request("PUT", self.path.add([id]), content, serializer=self.serializer)
        response.decode_write(self.session.send(req))

    def _json_request(self, method, path, value, query=None):
        return request.build_json_request(method, path, value, query=query, serializer=self.serializer)

    @property
    def security(self):
        """The security object of the database.

        :rtype: `SecurityDocument`
        """
        req = request.build_request("GET", self.path.add("_security"))
        return SecurityDocument.from_json(response.decode_json(self.session.send(req)))

    @security.setter
    def security(self, doc):
        if isinstance(doc, SecurityDocument):
            doc = doc.json()
        req = self._json_request("PUT", self.path.add("_security"), doc)
        response.decode_json(self.session.send(req), expected=(200,))

    def save(self, doc, batch=False):
        """Create a new document or update an existing document.

        A document with a ``_rev`` is updated in place with ``PUT``; the
        revision is sent exactly as given, and a stale one is answered with a
        conflict. A document without ``_id`` is posted and gets an ID
        allocated by the server.

        Note that it is generally better to avoid saving documents with no _id
        and instead generate document IDs on the client side. This is due to
        the fact that the underlying HTTP ``POST`` method is not idempotent.
        To avoid such problems you can generate a UUID on the client side::

            from uuid import uuid4
            doc = {'_id': uuid4().hex, 'type': 'person', 'name': 'John Doe'}
            db.save(doc)

        The given document is not modified.

        :param doc: the document to store
        :param batch: let the server store the document later (``batch=ok``);
                      no revision is returned then
        :return: (id, rev) tuple of the save document
        :rtype: `tuple`
        :raise HTTPConflict: if ``_rev`` is missing or stale for an existing
                             document
        :raise EncodingError: if the document cannot be serialized
        """
        query = 'batch=ok' if batch else None
        if doc.get('_id'):
            req = self._json_request("PUT", self.path.add([doc['_id']]), doc, query=query)
        else:
            body = dict(doc)
            body.pop('_rev', None)
            req = self._json_request("POST", self.path, body, query=query)
        data = response.decode_write(self.session.send(req))
        # Not present for batch='ok'
        return data['id'], data.get('rev')

    def create_document(self, content, id=None):
        """Create a document from JSON text or a mapping.

        Text is parsed first, so malformed JSON never reaches the server. An
        empty ``_rev`` is dropped.

        :param content: JSON text or a `dict`
        :param id: the document ID; allocated by the server when omitted
        :return: the server's ``{"ok", "id", "rev"}`` answer
        :raise EncodingError: if `content` is not a JSON object
        """
        if isinstance(content, (str, bytes)):
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            content = self.serializer.loads(content)
        if not isinstance(content, dict):
            raise exceptions.EncodingError("A document must be a JSON object")
        content = dict(content)
        if content.get('_rev') is None:
            content.pop('_rev', None)
        id = id or content.get('_id')
        if id:
            req = self._json_request("PUT", self.path.add([id]), content)
        else:
            req = self._json_request("POST", self.path, content)
        return response.decode_write(self.session.send(req))

    def cleanup(self):
        """Clean up old design document indexes.

        Remove all unused index files from the database storage area.

        :return: a boolean to indicate successful cleanup initiation
        :rtype: `bool`
        """
        req = self._json_request("POST", self.path.add("_view_cleanup"), {})
        return response.decode_accepted(self.session.send(req))['ok']

    def compact(self, ddoc=None):
        """Compact the database or a design document's index.

        Without an argument, this will try to prune all old revisions from the
        database. With an argument, it will compact the index cache for all
        views in the design document specified.

        :return: a boolean to indicate whether the compaction was initiated
                 successfully
        :rtype: `bool`
        """
        if ddoc:
            return self.compact_views(ddoc)
        # Needs empty json arguments, so that 'application/json' content-type is set
        req = self._json_request("POST", self.path.add("_compact"), {})
        return response.decode_accepted(self.session.send(req))['ok']

    def compact_views(self, design_doc):
        req = self._json_request("POST", self.path.add(["_compact", design_doc]), {})
        return response.decode_accepted(self.session.send(req))['ok']

    def copy(self, src, dest):
        """Copy the given document to create a new document.

        :param src: the ID of the document to copy, or a dictionary or
                    `Document` object representing the source document.
        :param dest: either the destination document ID as string, or a
                     dictionary or `Document` instance of the document that
                     should be overwritten.
        :return: the new revision of the destination document
        :rtype: `str`
        """
        src_id = src if isinstance(src, str) else _as_dict(src)['_id']
        if isinstance(dest, str):
            dest_id, dest_rev = dest, None
        else:
            dest = _as_dict(dest)
            dest_id, dest_rev = dest['_id'], dest.get('_rev')

        if dest_rev:
            destination = "{}?rev={}".format(_quote(dest_id), _quote(dest_rev))
        else:
            destination = _quote(dest_id)

        req = request.build_request("COPY", self.path.add([src_id]), headers={'Destination': destination})
        return response.decode_write(self.session.send(req))['rev']

    def delete(self, id, rev):
        """Delete a document revision.

        >>> server = Server()
        >>> db = server.create('python-tests')

        >>> db['johndoe'] = dict(type='Person', name='John Doe')
        >>> doc = db['johndoe']
        >>> db.delete(doc.id, '1-stale') # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
          ...
        HTTPConflict: Document update conflict.

        >>> del server['python-tests']

        :param id: the document ID
        :param rev: the revision being deleted
        :return: the revision of the deletion
        :raise HTTPConflict: if the document was updated in the database
        """
        if not id or not rev:
            raise ValueError('Both id and rev must have a value that is not empty')
        req = request.build_request("DELETE", self.path.add([id]), query={'rev': rev})
        return response.decode_json(self.session.send(req)).get('rev')

    def get(self, id, default=None, attachments=False, rev=None, revs=False, conflicts=False,
            wrapper=Document):
        """Return the document with the specified ID.

        :param id: the document ID
        :param default: the default value to return when the document is not
                        found
        :param attachments: include attachment bodies inline (base64)
        :param rev: fetch this revision instead of the latest
        :param wrapper: callable wrapping the document data
        :return: a `Document` object representing the requested document, or the given default value
                 if no document with the ID was found
        :rtype: `Document`
        """
        params = {}
        if attachments:
            params['attachments'] = 'true'
        if conflicts:
            params['conflicts'] = 'true'
        if rev is not None:
            params['rev'] = rev
        if revs:
            params['revs'] = 'true'
        req = request.build_request("GET", self.path.add([id]), query=params,
                                    headers={"Accept": request.JSON_MIME})
        doc = response.decode_document(self.session.send(req), wrapper=wrapper)
        if doc is None:
            return default
        return doc

    def get_document(self, id, attachments=False, wrapper=Document):
        """Same as `get`, returning `None` for a missing document."""
        return self.get(id, attachments=attachments, wrapper=wrapper)

    def revisions(self, id):
        """Return all available revisions of the given document.

        :param id: the document ID
        :return: an iterator over Document objects, each a different revision,
                 in reverse chronological order, if any were found
        """
        data = self.get(id, revs=True)
        if data is None:
            return
        startrev = data['_revisions']['start']
        for index, rev in enumerate(data['_revisions']['ids']):
            target_rev = '%d-%s' % (startrev - index, rev)
            doc = self.get(id, rev=target_rev)
            if doc is None:
                return
            yield doc

    def _current_rev(self, id):
        log.warning("No revision given for %s/%s, using the latest one; "
                    "concurrent updates in between will be overwritten", self.name, id)
        doc = self.get(id)
        if doc is None:
            raise exceptions.MissingDocument("Document does not exist")
        return doc.rev

    def put_attachment(self, id, content, filename=None, content_type=None, rev=None):
        """Create or replace an attachment.

        Pass the ``rev`` of the document to have a concurrent update reported
        as a conflict. Without it the latest revision is fetched first, and an
        update landing between that read and the write is silently built
        upon.

        :param id: the document ID
        :param content: the content to upload, either a file-like object,
                        bytes or a string; file-like objects are streamed
        :param filename: the name of the attachment file; if omitted, this
                         function tries to get the filename from the file-like
                         object passed as the `content` argument value
        :param content_type: content type of the attachment; if omitted, the
                             MIME type is guessed based on the file name
                             extension
        :param rev: the current revision of the document
        :return: the new revision of the document
        :raise HTTPConflict: if `rev` is stale
        """
        if filename is None:
            try:
                filename = os.path.basename(content.name)
            except AttributeError as exc:
                raise ValueError('Could not determine filename from file object') from exc
        if not content_type:
            (content_type, enc) = mimetypes.guess_type(filename, strict=False)
            if not content_type:
                content_type = BIN_MIME
        if rev is None:
            rev = self._current_rev(id)
        req = request.build_request("PUT", self.path.add([id, filename]), query={'rev': rev},
                                    body=content, content_type=content_type)
        return response.decode_write(self.session.send(req))['rev']

    def open_attachment(self, id, filename, rev=None):
        """Open an attachment for streamed reading.

        >>> with db.open_attachment('johndoe', 'photo.jpg') as att:   #doctest: +SKIP
        ...     for chunk in att.iter_content():
        ...         out.write(chunk)

        :param id: the document ID
        :param filename: the name of the attachment file
        :param rev: read the attachment of this document revision
        :return: an `Attachment`, or `None` if the document or attachment
                 does not exist; close it when done
        """
        query = {'rev': rev} if rev is not None else None
        req = request.build_request("GET", self.path.add([id, filename]), query=query, stream=True)
        resp = self.session.send(req)
        if resp.status_code == 404:
            resp.close()
            return None
        try:
            response.raise_for_status(resp)
        except exceptions.HTTPError:
            resp.close()
            raise
        return Attachment(filename, resp)

    def get_attachment(self, id, filename, default=None, rev=None):
        """Return the whole content of an attachment, or `default`.

        Use `open_attachment` for large attachments.
        """
        attachment = self.open_attachment(id, filename, rev=rev)
        if attachment is None:
            return default
        with attachment:
            return attachment.read()

    def delete_attachment(self, id, filename, rev=None):
        """Delete the specified attachment.

        :param id: the document ID
        :param filename: the name of the attachment file
        :param rev: the current revision of the document; looked up first
                    when omitted, see `put_attachment`
        :return: the new revision of the document
        """
        if rev is None:
            rev = self._current_rev(id)
        req = request.build_request("DELETE", self.path.add([id, filename]), query={'rev': rev},
                                    headers={"Accept": request.JSON_MIME})
        return response.decode_json(self.session.send(req))['rev']

    def bulk(self, all_or_nothing=False, new_edits=True):
        """Start a `bulk.BulkWrite` batch for this database."""
        return bulk.BulkWrite(self, all_or_nothing=all_or_nothing, new_edits=new_edits)

    def update(self, documents, all_or_nothing=False, new_edits=True):
        """Perform a bulk update or insertion of the given documents using a
        single HTTP request.

        >>> server = Server()
        >>> db = server.create('python-tests')
        >>> for item in db.update([
        ...     Document(type='Person', name='John Doe'),
        ...     Document(type='Person', name='Mary Jane'),
        ...     Document(type='City', name='Gotham City')
        ... ]):
        ...     print(item.ok) #doctest: +ELLIPSIS
        True
        True
        True

        >>> del server['python-tests']

        Documents with ``_deleted`` set to `True` are deleted. Records of the
        result are looked up by document ID; some may be errors (for example
        conflicts) while others succeeded. That is a normal result, not an
        exception.

        :param documents: a sequence of dictionaries or `Document` objects, or
                          objects providing a ``items()`` method that can be
                          used to convert them to a dictionary
        :param all_or_nothing: ask the server to apply all documents or none
        :return: the per-document results
        :rtype: `bulk.BulkResult`
        :raise BatchRejected: if the server refused the batch as a whole
        """
        return self.bulk(all_or_nothing=all_or_nothing, new_edits=new_edits).extend(documents).submit()

    def find(self, mango_query, wrapper=None):
        """Execute a mango find-query against the database.

        Note: only available for CouchDB version >= 2.0.0

        :param mango_query: a dictionary describing criteria used to select
                            documents
        :param wrapper: an optional callable that should be used to wrap the
                        resulting documents
        :return: the query results as a list of `Document` (or whatever `wrapper` returns)
        """
        req = self._json_request("POST", self.path.add("_find"), mango_query)
        data = response.decode_json(self.session.send(req))
        return [(wrapper or Document)(doc) for doc in data.get('docs', [])]

    def _query(self, path, options=None, wrapper=None):
        req = request.build_view_request(path, options, max_url_length=self.server.max_url_length,
                                         serializer=self.serializer, base_url=self.session.base_url)
        return response.decode_view(self.session.send(req), wrapper=wrapper)

    def view(self, name, options=None, wrapper=None, **kwargs):
        """Execute a predefined view.

        >>> server = Server()
        >>> db = server.create('python-tests')
        >>> db['gotham'] = dict(type='City', name='Gotham City')

        >>> for row in db.view('_all_docs'):
        ...     print(row.id)
        gotham

        >>> del server['python-tests']

        :param name: the name of the view; for custom views, use the format
                     ``design_docid/viewname``, that is, the document ID of the
                     design document and the name of the view, separated by a
                     slash
        :param options: a `ViewOptions`; keyword arguments build one
        :return: the view results, or `None` if the view does not exist
        :rtype: `ViewResult`
        """
        if name.startswith('_'):
            design_doc_name = None
            view_name = name
        else:
            design_doc_name, view_name = name.split('/', 1)
        return self.query_view(design_doc_name, view_name, options, wrapper=wrapper, **kwargs)

    def query_view(self, design_doc, view_name, options=None, wrapper=None, **kwargs):
        """Query a view index to obtain data and/or documents.

        `options` holds the query parameters (see `options.ViewOptions` for
        the accepted names); they are encoded in a fixed order, so the same
        options always produce the same URL. When ``keys`` makes the URL too
        long, the keys are posted in the request body instead.

        If ``etag`` is set and the view did not change since, the result has
        ``not_modified`` set and no rows.

        Returns a ViewResult instance, containing the following attributes:

        - `rows`: the list of Row instances.
        - `offset`: the offset used for the set of rows.
        - `total_rows`: the total number of rows selected.
        - `etag`: the ETag to pass back for a conditional request.

        A Row object contains the following attributes:

        - `id`: the identifier of the document, if any.
        - `key`: the key for the index row.
        - `value`: the value for the index row.
        - `doc`: the document, if any.
        - `error`: for ``_all_docs`` keys that do not exist.
        """
        options = _view_options(options, kwargs, self.serializer)
        if design_doc is None:
            if not view_name.startswith("_"):
                raise ValueError("a design document is needed for view %r" % view_name)
            path = self.path.add(view_name)
        else:
            path = self.path.add(["_design", design_doc, "_view", view_name])
        if options is not None and options.get('include_docs') and wrapper is None:
            wrapper = Document
        return self._query(path, options, wrapper=wrapper)

    def all_docs(self, options=None, **kwargs):
        """Query ``_all_docs``, see `query_view`."""
        return self.query_view(None, "_all_docs", options, **kwargs)

    def get_documents(self, keys):
        """Fetch many documents in a single request.

        :param keys: the document IDs
        :return: a `ViewResult` whose rows carry the documents, in the order
                 of `keys`; rows of missing IDs carry an ``error``
        """
        return self.all_docs(ViewOptions(keys=keys, include_docs=True, serializer=self.serializer))

    def design_documents(self):
        """List the design documents of the database."""
        return self.all_docs(startkey="_design", endkey="_design0")

    def show(self, design_doc, show_name, doc_id=None):
        """Call a 'show' function.

        :return: the body the show function rendered, as text
        """
        segments = ["_design", design_doc, "_show", show_name]
        if doc_id:
            segments.append(doc_id)
        req = request.build_request("GET", self.path.add(segments))
        resp = self.session.send(req)
        response.raise_for_status(resp)
        return resp.text

    def list(self, design_doc, list_name, view_name, options=None, **kwargs):
        """Format a view using a 'list' function.

        :param view_name: a view of the same design document, or
                          ``other_design_doc/view`` for a view of another one
        :return: a `views.ListResult` with the rendered text
        """
        options = _view_options(options, kwargs, self.serializer)
        segments = ["_design", design_doc, "_list", list_name]
        segments.extend(view_name.split('/', 1))
        req = request.build_view_request(self.path.add(segments), options,
                                         max_url_length=self.server.max_url_length,
                                         serializer=self.serializer,
                                         base_url=self.session.base_url)
        resp = self.session.send(req)
        response.raise_for_status(resp)
        return ListResult(resp.text, resp.headers.get('Content-Type'), resp.etag)

    def update_handler(self, design_doc, handler, doc_id, body):
        """Call a server side update handler for a document.

        :return: the handler's response text
        """
        req = self._json_request("PUT", self.path.add(["_design", design_doc, "_update", handler, doc_id]), body)
        resp = self.session.send(req)
        response.raise_for_status(resp)
        return resp.text

    def search(self, design_doc, index, query, **params):
        """Run a full text search against a search index.

        :param query: the search query, e.g. ``name:john``
        """
        params['q'] = query
        req = request.build_request("GET", self.path.add(["_design", design_doc, "_search", index]),
                                    query=params, headers={"Accept": request.JSON_MIME})
        return response.decode_json(self.session.send(req))


class Attachment(object):
    """A streamed attachment download.

    Close it, or use it as a context manager, to give the connection back.
    """

    def __init__(self, filename, resp):
        self.filename = filename
        self._response = resp

    @property
    def content_type(self):
        return self._response.headers.get('Content-Type')

    @property
    def length(self):
        length = self._response.headers.get('Content-Length')
        return int(length) if length is not None else None

    def iter_content(self, chunk_size=CHUNK_SIZE):
        return self._response.raw.iter_content(chunk_size=chunk_size)

    def read(self):
        return b''.join(self.iter_content())

    def close(self):
        self._response.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.filename)


def _quote(name):
    return quote(name, safe='')


def _as_dict(doc):
    if isinstance(doc, dict):
        return doc
    elif hasattr(doc, 'items'):
        return dict(doc.items())
    raise TypeError('expected dict or string, got %s' % type(doc))


def _view_options(options, kwargs, serializer):
    if kwargs:
        if options is not None:
            return options.replace(**kwargs)
        return ViewOptions(serializer=serializer, **kwargs)
    return options
