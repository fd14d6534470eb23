class SpreadsheetImportError(Exception):
    """Base class for errors that abort a whole import attempt."""


class UnreadableFileError(SpreadsheetImportError):
    def __init__(self, detail: str = ""):
        self.detail = detail
        message = "Could not read the uploaded file as a spreadsheet"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MissingSheetError(SpreadsheetImportError):
    def __init__(self, found: list[str], required: list[str]):
        self.found = list(found)
        self.required = list(required)
        found_str = ", ".join(self.found) if self.found else "(none)"
        required_str = " and ".join(f'"{name}"' for name in self.required)
        super().__init__(
            f"Missing required tabs. Found: {found_str}. Need {required_str} tab"
            + ("s." if len(self.required) > 1 else ".")
        )
