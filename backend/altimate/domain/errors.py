MODEL_LOAD_FAILED = "MODEL_LOAD_FAILED"
CLASSIFICATION_FAILED = "CLASSIFICATION_FAILED"
ANALYSIS_FAILED = "ANALYSIS_FAILED"


class ImageAnalysisError(Exception):
    """Error raised by every public entry point.

    - message: human readable description (Korean, shown to end users)
    - code: short machine readable tag (MODEL_LOAD_FAILED, CLASSIFICATION_FAILED, ANALYSIS_FAILED)

    The original low-level exception is kept in ``__cause__``.
    """

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message
