from .user import User, UserRole
from .ledger import Ledger
from .metric import QuantityMetric
from .district import District, CommunicationStaff
from .item import Item

from .stock import HQStock, DistrictStock
from .sequence import VoucherSequence
from .procurement import Budget, Seller, Procurement

from .hq_issuance import HQIssuanceVoucher, HQItemMovement, HQLARVoucher
from .district_issuance import (
    DistrictIssuanceVoucher,
    DistrictItemMovement,
    DistrictLARVoucher,
)
from .loan import LoanItem

__all__ = [n for n in dir() if n[:1].isupper()]
