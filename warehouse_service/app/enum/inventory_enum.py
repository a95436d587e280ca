from enum import Enum


class TransactionType(str, Enum):
    inbound = "inbound"
    outbound = "outbound"


class ConversionOperation(str, Enum):
    multiply = "multiply"
    divide = "divide"
