import sys
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field

from .classifier import OPEN_FINGER_RATIO

DEFAULT_SYSTEM_INSTRUCTION = (
    "Eres un comentarista ingenioso y sarcástico de un juego de Piedra, Papel, Tijera. "
    "Tu trabajo es dar una respuesta de una sola frase muy corta (máximo 15 palabras) "
    "reaccionando al resultado del juego. "
    "Sé divertido. Si gana la CPU, presume un poco. "
    "Si gana el humano, pon una excusa o felicítalo a regañadientes."
)


class ClassifierConfig(BaseModel):
    open_ratio: float = Field(
        OPEN_FINGER_RATIO,
        gt=0,
        description="Minimum tip/PIP distance ratio (from the wrist) for a finger to be considered open",
    )


class GameConfig(BaseModel):
    countdown_seconds: int = Field(3, ge=1, description="Countdown value at the start of each turn")
    countdown_interval: float = Field(1.0, gt=0, description="Delay (seconds) between two countdown steps")
    shuffle_interval: float = Field(0.1, gt=0, description="Delay (seconds) between two opponent shuffle frames")
    commentary_timeout: float = Field(
        10.0, gt=0, description="Max time (seconds) to wait for commentary before using the fallback text"
    )


class CommentaryConfig(BaseModel):
    enabled: bool = Field(True, description="Ask the commentary backend to describe each turn")
    api_key: str | None = Field(
        None, description="Gemini API key (the GEMINI_API_KEY or API_KEY environment variables take precedence)"
    )
    model: str = Field("gemini-2.5-flash", description="Gemini model used for commentary")
    temperature: float = Field(1.0, ge=0, description="Sampling temperature for commentary")
    system_instruction: str = Field(DEFAULT_SYSTEM_INSTRUCTION, description="System instruction of the commentator")
    timeout: float = Field(10.0, gt=0, description="HTTP timeout (seconds) of a commentary request")


class CLIConfig(BaseModel):
    """Configuration for CLI settings."""

    camera: int = Field(0, ge=0, description="OpenCV index of the camera to use")
    mirror: bool = Field(True, description="Mirror the video output horizontally")
    size: int = Field(1280, description="Maximum dimension for camera capture resolution")
    use_gpu: bool = Field(False, description="Use GPU acceleration for hand detection")
    model_path: str = Field("hand_landmarker.task", description="Path of the MediaPipe hand landmarker model")


class Config(BaseModel):
    classifier: ClassifierConfig = Field(
        default_factory=lambda: ClassifierConfig(), description="Gesture classifier configuration"
    )
    game: GameConfig = Field(default_factory=lambda: GameConfig(), description="Game timing configuration")
    commentary: CommentaryConfig = Field(
        default_factory=lambda: CommentaryConfig(), description="Commentary backend configuration"
    )
    cli: CLIConfig = Field(default_factory=lambda: CLIConfig(), description="CLI configuration")

    @classmethod
    def get_user_path(cls) -> Path:
        app_name = "gesturock"
        config_dir = Path(platformdirs.user_config_dir(app_name))
        return config_dir / "config.json"

    @classmethod
    def validate_path(cls, path: Path | str | None) -> Path:
        if path is None:
            path = cls.get_user_path()
        elif isinstance(path, str):
            path = Path(path)

        return path.resolve()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        path = cls.validate_path(path)

        if not path.exists():
            # If the config file does not exist, return a default config
            print(f"Config file {path} does not exist. Returning default config.", file=sys.stderr)
            return cls()

        if not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        try:
            return cls.model_validate_json(path.read_text(), strict=True)
        except Exception as e:
            print(f"Error loading config from {path}: {e}", file=sys.stderr)
            print("Returning default config.", file=sys.stderr)
            return cls()

    def save(self, path: Path | str | None = None) -> Path:
        path = self.validate_path(path)

        if path.exists() and not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path
