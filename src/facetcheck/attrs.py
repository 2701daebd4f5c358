"""*attrs* helpers: field documentation and documented class decorators."""

from __future__ import annotations

import enum
import re
import typing as t
from textwrap import dedent, indent

import attrs


class MetadataKey(enum.Enum):
    """Keys under which field documentation is stored in attrs metadata."""

    DOC = "doc"  #: Field description (str)
    TYPE = "type"  #: Documented type of the field value (str)
    INIT_TYPE = "init_type"  #: Documented type of the constructor argument (str)
    DEFAULT = "default"  #: Documented default value (str)


def documented(
    attrib: attrs.Attribute,
    doc: str | None = None,
    type: str | None = None,
    init_type: str | None = None,
    default: str | None = None,
) -> attrs.Attribute:
    """
    Attach documentation to an attrs field definition.

    Parameters
    ----------
    attrib : attrs.Attribute
        Field definition, as returned by :func:`attrs.field`.

    doc : str, optional
        Field description.

    type : str, optional
        Documented type of the field value.

    init_type : str, optional
        Documented type accepted by the constructor. Defaults to ``type``
        when the class docstring is generated.

    default : str, optional
        Documented default value.

    Returns
    -------
    attrs.Attribute
        ``attrib``, with updated metadata.
    """
    for key, value in [
        (MetadataKey.DOC, doc),
        (MetadataKey.TYPE, type),
        (MetadataKey.INIT_TYPE, init_type),
        (MetadataKey.DEFAULT, default),
    ]:
        if value is not None:
            attrib.metadata[key] = value

    return attrib


def _add_section(cls_doc: str, title: str, entries: list[str]) -> str:
    # New sections go after the summary, ahead of any existing section
    section = f"{title}\n{'-' * len(title)}\n" + "\n".join(entries)
    match = re.search(r"^\S[^\n]*\n-{3,}\n", cls_doc, flags=re.MULTILINE)

    if match is None:
        return f"{cls_doc}\n\n{section}"

    return f"{cls_doc[:match.start()]}{section}\n{cls_doc[match.start():]}"


def parse_docs(cls: type) -> type:
    """
    Append "Parameters" and "Fields" sections generated from the field
    documentation to the docstring of an attrs class.

    Must be applied after the attrs decorator. Fields without a ``doc``
    entry (see :func:`documented`) are skipped; private fields are only
    listed as constructor parameters.
    """
    params = []
    fields = []

    for field in attrs.fields(cls):
        meta = field.metadata
        if MetadataKey.DOC not in meta:
            continue

        doc = meta[MetadataKey.DOC]
        type_doc = meta.get(MetadataKey.TYPE, str(field.type))
        init_type_doc = meta.get(MetadataKey.INIT_TYPE, type_doc)
        default_doc = meta.get(MetadataKey.DEFAULT)

        header = f"{field.name.lstrip('_')} : {init_type_doc}"
        if default_doc is not None:
            header += f", default: {default_doc}"
        params.append(f"{header}\n{indent(doc, '    ')}\n")

        if not field.name.startswith("_"):
            brief = re.split(r"\.\s", doc, maxsplit=1)[0].strip().rstrip(".") + "."
            fields.append(f"{field.name} : {type_doc}\n{indent(brief, '    ')}\n")

    if not params:
        return cls

    cls_doc = dedent((cls.__doc__ or "").lstrip("\n")).rstrip()
    if fields:
        cls_doc = _add_section(cls_doc, "Fields", fields)
    cls.__doc__ = _add_section(cls_doc, "Parameters", params).rstrip() + "\n"

    return cls


def get_doc(
    cls: type, attrib: str, field: t.Literal["doc", "type", "init_type", "default"]
) -> str:
    """
    Fetch a documentation entry attached with :func:`documented`.

    Raises
    ------
    ValueError
        If ``field`` is not a documentation key or is missing from the
        attribute's metadata.
    """
    try:
        key = MetadataKey[field.upper()]
    except KeyError:
        raise ValueError(f"unsupported attribute doc field '{field}'")

    try:
        return attrs.fields_dict(cls)[attrib].metadata[key]
    except KeyError:
        raise ValueError(f"{cls.__name__}.{attrib} has no documented field '{field}'")


def define(maybe_cls=None, **kwargs):
    """
    :func:`attrs.define` followed by :func:`parse_docs`. Keyword arguments
    are forwarded to :func:`attrs.define`.
    """

    def wrap(cls):
        return parse_docs(attrs.define(cls, **kwargs))

    return wrap if maybe_cls is None else wrap(maybe_cls)


def frozen(maybe_cls=None, **kwargs):
    """
    :func:`attrs.frozen` followed by :func:`parse_docs`. Keyword arguments
    are forwarded to :func:`attrs.frozen`.
    """

    def wrap(cls):
        return parse_docs(attrs.frozen(cls, **kwargs))

    return wrap if maybe_cls is None else wrap(maybe_cls)
