from __future__ import annotations

from typing import NewType

StoreId = NewType("StoreId", str)
CategoryId = NewType("CategoryId", int)
ProductId = NewType("ProductId", int)
AdditionalGroupId = NewType("AdditionalGroupId", int)
AdditionalItemId = NewType("AdditionalItemId", int)
CartId = NewType("CartId", str)
CartLineId = NewType("CartLineId", str)
OrderId = NewType("OrderId", int)
