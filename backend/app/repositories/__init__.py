"""
Data-access layer for the BOOST back office.

A repository module owns every query against one table (or one small
aggregate, e.g. products with their categories). HTTP status codes and
request parsing stay in `app.api`; repositories raise `app.core.errors`
exceptions instead.

Layout:
    - `base.CatalogRepository` carries the shared catalog behaviour
      (create/update/soft delete/reorder/featured/pagination); services,
      plans, products and blog episodes each configure one instance
    - content, leads, uploads and users are plain function modules
    - Every function takes the `AsyncSession` first and only flushes;
      `get_db` decides between commit and rollback
"""
