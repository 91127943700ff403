from termplan.models.document import StoredDocument  # noqa: F401
