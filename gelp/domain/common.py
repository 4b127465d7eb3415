# gelp/domain/common.py
from typing import Annotated

from pydantic import StringConstraints

# required display names: surrounding blanks are dropped, empty is rejected
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]

# quantities are stored in 32-bit INTEGER columns
MAX_QUANTITY = 2**31 - 1
