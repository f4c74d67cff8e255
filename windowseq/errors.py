class InvalidArgument(ValueError):
    """raised synchronously when an operator is called with an unusable argument"""

    def __init__(self, name: str, message: str):
        super().__init__(f'{name}: {message}')
        self.name = name
