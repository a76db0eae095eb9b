from typing import Literal


existing_backends = Literal[
    "aws",
    "gcp",
    "file",
]
