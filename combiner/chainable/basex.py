"""
Base architecture for chainable image combining components.

This module provides the pixel containers, the error taxonomy and the
component base class shared by every stage of the combining pipeline,
together with the run-level logging support.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple
from abc import ABC, abstractmethod
import logging
import traceback
from pathlib import Path
from datetime import datetime


CHANNELS = 4  # one byte each for red, green, blue, alpha


@dataclass
class PixelBuffer:
    """Decoded RGBA pixel data as one flat byte array."""
    width: int
    height: int
    data: np.ndarray  # Flat uint8 array of width * height * CHANNELS bytes, row-major
    metadata: Dict[str, Any] = field(default_factory=dict)  # Source file and processing history

    def __post_init__(self):
        """Validate PixelBuffer after initialization."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid dimensions: {self.width}x{self.height}")

        if self.data.ndim != 1:
            raise ValueError(f"Pixel data must be a flat 1D array, got {self.data.ndim}D")

        if self.data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {self.data.dtype}")

        expected = self.width * self.height * CHANNELS
        if self.data.size != expected:
            raise ValueError(
                f"Pixel data holds {self.data.size} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )

        if not self.data.flags['C_CONTIGUOUS']:
            self.data = np.ascontiguousarray(self.data)

    @property
    def dimensions(self) -> Tuple[int, int]:
        """Get (width, height)."""
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_array(cls, pixels: np.ndarray, metadata: Optional[Dict[str, Any]] = None) -> 'PixelBuffer':
        """Build a buffer from a (height, width, 4) array."""
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"Expected (height, width, {CHANNELS}) array, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        return cls(
            width=width,
            height=height,
            data=np.array(pixels, dtype=np.uint8, order='C').reshape(-1),
            metadata=dict(metadata or {})
        )

    def to_array(self) -> np.ndarray:
        """View the flat data as a (height, width, 4) array."""
        return self.data.reshape(self.height, self.width, CHANNELS)

    def add_processing_step(self, component_name: str, parameters: Dict[str, Any]):
        """Add a processing step to the metadata history."""
        if 'processing_history' not in self.metadata:
            self.metadata['processing_history'] = []

        self.metadata['processing_history'].append({
            'component': component_name,
            'parameters': parameters.copy(),
            'timestamp': np.datetime64('now').astype(str)
        })


@dataclass
class ImagePair:
    """The two decoded inputs travelling together through the pipeline."""
    first: PixelBuffer
    second: PixelBuffer
    format_tag: str  # Container format shared by both inputs, e.g. 'PNG'


class ProcessingError(Exception):
    """Custom exception for image combining errors."""
    def __init__(self, message: str, component: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.component = component
        self.details = details or {}


class UnableToReadImageFromPath(ProcessingError):
    """The input file could not be read from disk."""


class UnableToFormatImage(ProcessingError):
    """The decoder could not determine the container format of an input."""


class UnableToDecodeImage(ProcessingError):
    """The format was recognized but the pixel data could not be decoded."""


class DifferentImageFormats(ProcessingError):
    """The two inputs use different container formats."""


class BufferTooSmall(ProcessingError):
    """Combined data exceeds the capacity reserved for the output image."""


class UnableToSaveImage(ProcessingError):
    """The encoder failed to write the output file."""


@dataclass
class OutputImage:
    """Holds the combined image until it is handed to the encoder."""
    width: int
    height: int
    name: str  # Destination path
    capacity: int
    data: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.uint8))

    def set_data(self, data: np.ndarray):
        """Store combined pixel data, refusing anything beyond the reserved capacity."""
        if data.size > self.capacity:
            raise BufferTooSmall(
                f"Combined data of {data.size} bytes exceeds output capacity of {self.capacity} bytes",
                component="OutputImage",
                details={'data_size': int(data.size), 'capacity': self.capacity}
            )
        self.data = np.array(data, dtype=np.uint8, copy=True)


class LogManager:
    """Manages the run log file for chainable components with full traceback support."""

    _log_file_path: Optional[Path] = None
    _file_handler: Optional[logging.FileHandler] = None
    _initialized = False

    @classmethod
    def initialize(cls, log_dir: str = "logs"):
        """Initialize the log manager with a clean log file for this run."""
        if cls._initialized:
            cls.cleanup()

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        cls._log_file_path = log_path / f"combiner_run_{timestamp}.log"

        cls._file_handler = logging.FileHandler(cls._log_file_path, mode='w', encoding='utf-8')
        cls._file_handler.setLevel(logging.DEBUG)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        cls._file_handler.setFormatter(file_formatter)

        cls._initialized = True

        root_logger = logging.getLogger('combiner')
        root_logger.addHandler(cls._file_handler)
        root_logger.setLevel(logging.DEBUG)

        cls.log_info("LogManager", f"Initialized logging to: {cls._log_file_path}")

    @classmethod
    def cleanup(cls):
        """Clean up logging resources."""
        if cls._file_handler:
            root_logger = logging.getLogger('combiner')
            if cls._file_handler in root_logger.handlers:
                root_logger.removeHandler(cls._file_handler)

            cls._file_handler.close()
            cls._file_handler = None

        cls._initialized = False

    @classmethod
    def log_info(cls, component: str, message: str):
        """Log an info message."""
        if cls._initialized:
            logging.getLogger(f'combiner.{component}').info(message)

    @classmethod
    def log_error(cls, component: str, message: str, exception: Optional[Exception] = None):
        """Log an error message with full traceback."""
        if cls._initialized:
            logger = logging.getLogger(f'combiner.{component}')
            logger.error(message)

            if exception is not None:
                tb_str = ''.join(traceback.format_exception(type(exception), exception, exception.__traceback__))
                logger.debug(f"Full traceback:\n{tb_str}")

    @classmethod
    def log_warning(cls, component: str, message: str):
        """Log a warning message."""
        if cls._initialized:
            logging.getLogger(f'combiner.{component}').warning(message)

    @classmethod
    def log_debug(cls, component: str, message: str):
        """Log a debug message."""
        if cls._initialized:
            logging.getLogger(f'combiner.{component}').debug(message)

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        """Get the current log file path."""
        return cls._log_file_path


class ChainComponent(ABC):
    """Abstract base class for chainable image combining components."""

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Set up console logger for the component."""
        logger = logging.getLogger(f"combiner.{self.name}")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                f'[{self.name}] %(levelname)s: %(message)s'
            )
            handler.setFormatter(formatter)
            handler.setLevel(logging.INFO)
            logger.addHandler(handler)
            logger.setLevel(logging.DEBUG)
        return logger

    @abstractmethod
    def process(self, data: Any) -> Any:
        """Process the data. Must be implemented by subclasses."""
        pass

    def execute(self, data: Any) -> Any:
        """Validate and process one step, wrapping unexpected failures in ProcessingError."""
        try:
            self._validate_input(data)

            LogManager.log_debug(self.name, "Starting processing")

            processed_data = self.process(data)

            self._validate_output(processed_data)

            LogManager.log_debug(self.name, "Processing completed successfully")

            return processed_data

        except ProcessingError as e:
            if e.component is None:
                e.component = self.name
            raise
        except Exception as e:
            raise ProcessingError(
                f"Processing failed: {str(e)}",
                component=self.name,
                details={'original_exception': type(e).__name__}
            ) from e

    def _validate_input(self, data: Any):
        """Validate input data. Override in subclasses for specific validation."""
        pass

    def _validate_output(self, data: Any):
        """Validate output data. Override in subclasses for specific validation."""
        pass
