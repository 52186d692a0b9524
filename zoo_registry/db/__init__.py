# Database package: engine/session factory, ORM tables and the demo seed
