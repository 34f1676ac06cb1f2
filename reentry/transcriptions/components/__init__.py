from .step_defect_comp import StepDefectComp as StepDefectComp
from .time_comp import TimeComp as TimeComp
