# Services package init
"""
Markpad Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - tags.normalize_tags:            free-form tag input → clean ordered list
    - query_builder.RecordQuery:      list query params → SQLAlchemy filter
    - metadata_service.MetadataFetcher: best-effort page title lookup
    - record_service.OwnedRecordService: owner-scoped get/list/delete, id parsing
    - note_service.NoteService:       note create/update rules
    - bookmark_service.BookmarkService: bookmark create/update rules, title derivation
"""
