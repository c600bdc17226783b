from enum import Enum


class Unit(str, Enum):
    # weight
    oz = "oz"
    lbs = "lbs"
    g = "g"
    kg = "kg"
    # volume
    tsp = "tsp"
    tbsp = "tbsp"
    cup = "cup"
    pt = "pt"
    qt = "qt"
    gal = "gal"
    ml = "ml"
    l = "l"
    fl_oz = "fl oz"
    # count
    each = "each"
    dozen = "dozen"


class ImportAction(str, Enum):
    created = "created"
    updated = "updated"
    skipped = "skipped"
    error = "error"
    deactivated = "deactivated"


class ReconcileAction(str, Enum):
    create = "create"
    update = "update"
    skip = "skip"
    no_change = "no-change"
    deactivate = "deactivate"
