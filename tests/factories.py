"""Test factories using factory_boy."""

import hashlib

import factory

from mcp_kb.core.models.blocklist import BlocklistEntry, BlocklistKind, BlocklistSource
from mcp_kb.core.models.document import IndexedDocument, file_type_for, make_document_id
from mcp_kb.core.models.repository import (
    RepositoryClassification,
    RepositoryDescriptor,
    TreeEntry,
    TreeEntryKind,
)


class IndexedDocumentFactory(factory.Factory):
    """Factory for creating IndexedDocument instances."""

    class Meta:
        model = IndexedDocument

    owner = "acme"
    name = "docs"
    branch = "main"
    path = factory.Sequence(lambda n: f"docs/page_{n}.md")
    id = factory.LazyAttribute(lambda o: make_document_id(o.owner, o.name, o.branch, o.path))
    content = factory.Faker("paragraph", nb_sentences=5)
    file_type = factory.LazyAttribute(lambda o: file_type_for(o.path))
    size = factory.LazyAttribute(lambda o: len(o.content.encode("utf-8")))
    content_hash = factory.LazyAttribute(lambda o: hashlib.sha1(o.content.encode("utf-8")).hexdigest())


class RepositoryDescriptorFactory(factory.Factory):
    """Factory for creating RepositoryDescriptor instances."""

    class Meta:
        model = RepositoryDescriptor

    owner = "acme"
    name = factory.Sequence(lambda n: f"repo-{n}")
    branch = "main"
    include_patterns = factory.LazyFunction(lambda: ["**/*.md"])
    exclude_patterns = factory.LazyFunction(lambda: ["**/node_modules/**"])
    classification = RepositoryClassification.USER


class ServerEntryFactory(factory.Factory):
    """Factory for unhashed server blocklist entries."""

    class Meta:
        model = BlocklistEntry

    kind = BlocklistKind.SERVER
    server_name = factory.Sequence(lambda n: f"server-{n}")
    reason = factory.Faker("sentence")
    source = BlocklistSource.USER


class PatternEntryFactory(factory.Factory):
    """Factory for unhashed file-pattern blocklist entries."""

    class Meta:
        model = BlocklistEntry

    kind = BlocklistKind.FILE_PATTERN
    pattern = factory.Sequence(lambda n: f"**/secret_{n}/**")
    reason = factory.Faker("sentence")
    source = BlocklistSource.USER


class TreeEntryFactory(factory.Factory):
    """Factory for creating TreeEntry instances."""

    class Meta:
        model = TreeEntry

    path = factory.Sequence(lambda n: f"docs/file_{n}.md")
    kind = TreeEntryKind.BLOB
    size = 10
    content_hash = factory.Sequence(lambda n: f"{n:040x}")
