from importlib import import_module

modules = [
    'auth',
    'test_items',
    'studies',
    'facility_docs',
    'audit',
]

for m in modules:
    import_module(f'.{m}', __name__)

__all__ = modules
