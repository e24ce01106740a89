from enum import IntEnum



class ErrorCodes(IntEnum):
    SUCCESS = 0
    EXCEPTION = 2
    ENTRY_NOT_FOUND = 3
    CONFIG_ERROR = 4
    BUNDLE_ERROR = 5
    NOT_AN_ARCHIVE = 42

    @classmethod
    def raise_error(cls, error_code=EXCEPTION, error_msg=""):
        return cls.get_error_class(error_code)(error_msg)

    @classmethod
    def get_error_class(cls, error_code: int):
        match error_code:
            case cls.ENTRY_NOT_FOUND:
                cls_error = EntryNotFound
            case cls.CONFIG_ERROR:
                cls_error = InvalidConfig
            case cls.BUNDLE_ERROR:
                cls_error = BundleError
            case cls.NOT_AN_ARCHIVE:
                cls_error = NotAnArchive
            case _:
                cls_error = Exception
        return cls_error

    @classmethod
    def from_exception(cls, error: BaseException):
        match error:
            case NotAnArchive():
                return cls.NOT_AN_ARCHIVE
            case EntryNotFound():
                return cls.ENTRY_NOT_FOUND
            case InvalidConfig():
                return cls.CONFIG_ERROR
            case BundleError():
                return cls.BUNDLE_ERROR
            case _:
                return cls.EXCEPTION



class NotAnArchive(Exception):
    pass



class EntryNotFound(KeyError):
    def __str__(self):
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""



class InvalidConfig(ValueError):
    pass



class BundleError(Exception):
    pass
