from enum import IntEnum

CLICK_PROVIDER = "click"

class ClickError(IntEnum):
    """Error codes of the Click SHOP API"""
    Success = 0
    SignFailed = -1
    InvalidAmount = -2
    ActionNotFound = -3
    AlreadyPaid = -4
    UserNotFound = -5
    TransactionNotFound = -6
    FailedToUpdate = -7
    BadRequest = -8
    TransactionCanceled = -9

class ClickAction(IntEnum):
    Prepare = 0
    Complete = 1

class TransactionState(IntEnum):
    CanceledAfterFail = -2
    Canceled = -1
    Pending = 0
    Paid = 1

ERROR_NOTES = {
    ClickError.Success: "Success",
    ClickError.SignFailed: "Invalid sign",
    ClickError.InvalidAmount: "Incorrect parameter amount",
    ClickError.ActionNotFound: "Action not found",
    ClickError.AlreadyPaid: "Already paid",
    ClickError.UserNotFound: "User not found",
    ClickError.TransactionNotFound: "Transaction not found",
    ClickError.FailedToUpdate: "Failed to update user",
    ClickError.BadRequest: "Product not found",
    ClickError.TransactionCanceled: "Transaction canceled",
}

# Notes the complete phase words differently
COMPLETE_ERROR_NOTES = {
    ClickError.AlreadyPaid: "Already paid for course",
}
