"""
Supplement catalog: loading, validation and lookups.

Modules
-------
loader : load_catalog() + get_supplement_by_id() +
         get_supplements_by_target_area() +
         get_supplements_by_substance_class().
"""
