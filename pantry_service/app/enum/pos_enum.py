from enum import Enum


class PosSystem(str, Enum):
    toast = "toast"
    square = "square"
    clover = "clover"
