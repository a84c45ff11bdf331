"""
Module de persistance SQLite pour PlexOrg.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine SQLite, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- hash_service.py : Empreinte de contenu XXH3-128
- repositories/ : Repository de traitement et RepositoryScope

Usage:
    from src.infrastructure.persistence.database import create_db_engine, init_db
    from src.infrastructure.persistence.repositories import RepositoryScope

    engine = create_db_engine("sqlite:///plexorg.db")
    init_db(engine)
    with RepositoryScope(engine)() as repo:
        repo.list_recent(10)
"""
