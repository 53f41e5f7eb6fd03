from typing import Dict, Hashable, Tuple, Union
from datetime import date, datetime

import pandas as pd

RegionId = Hashable
CaseRecord = Tuple[Union[date, datetime, pd.Timestamp, str], int]
RegionErrors = Dict[RegionId, str]
