"""sitegrid: multi-tenant site backend."""
