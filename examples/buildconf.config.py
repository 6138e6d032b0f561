from typing import Literal

OutputTarget = Literal["dist", "www"]

targets: list[OutputTarget] = ["dist", "www"]

exports.config: dict[str, object] = {
    "namespace": "example",
    "output_targets": targets,
    "log_level": "info",
}
