"""
Services package — business rules over the repositories.

Convention:
    - Functions accept `AsyncSession` as the first argument
    - Missing records raise `NotFoundError`, bad input `ValidationError`,
      duplicates `ConflictError`
    - Multi-step writes run inside `agency.db.session.atomic`
    - Authorization is not checked here; routers call `services.access`
"""
