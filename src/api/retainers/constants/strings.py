"""
User-facing strings of the retainer statement and usage widget.
Hour values are pre-formatted numbers (e.g. "1.5", "10").
"""


class RetainerText:
    # Started-with subtitles
    START_BUDGET_ONLY = "{budget}h budget"
    START_CYCLE_START = "{budget}h budget · cycle start"
    START_WITH_CARRY = "{budget}h budget + {hours}h from last month"
    START_WITH_DEDUCTION = "{budget}h budget – {hours}h from last month"
    START_NO_ROLLOVER = "{budget}h monthly budget"

    # Ending-balance subtitles
    CARRIES_OVER = "Carries over"
    DEDUCTED_NEXT = "Deducted next month"
    ALL_USED = "All hours used"
    PAYMENT_DUE = "Payment due"
    NOT_CARRIED_OVER = "Not carried over"
    NOT_USED = "Not used"
    NO_EXTRA_CHARGES = "No extra charges"

    # Row tags
    TAG_CARRIES = "{hours}h carries"
    TAG_OVER = "{hours}h over"
    TAG_UNUSED = "{hours}h unused"
    TAG_ON_BUDGET = "on budget"
    TAG_PAYMENT_DUE = "+{hours}h · payment due"

    # Settlement block
    EXTRA_HOURS_LABEL = "{range} · Extra hours"
    EXTRA_EXPLAIN_CYCLE = "{used}h used this cycle, {extra}h more than the {pool}h included."
    EXTRA_EXPLAIN_MONTH = "{used}h used, {extra}h more than the {budget}h included."
    EXTRA_CALC = "{hours} hours × {rate} {currency}/h"
    UNUSED_CYCLE = "{hours}h not used this cycle. Balance resets for the next cycle."
    UNUSED_MONTH = "{hours}h not used. Next month starts fresh."

    # Dashboard
    CURRENT_CYCLE = "Current cycle · {range}"
    THIS_MONTH = "This month"
    REMAINING = "{hours}h remaining"
    OVER_BUDGET = "–{hours}h over budget"
    FULLY_USED = "fully used"
