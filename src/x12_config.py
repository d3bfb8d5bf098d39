from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_SEGMENT_SEPARATOR = "~"
DEFAULT_ELEMENT_SEPARATOR = "*"
DEFAULT_SUB_ELEMENT_SEPARATOR = ":"

# --- Delimiters ---
class Delimiters(BaseModel):
    """The three separators of an X12 stream."""
    segment: str = DEFAULT_SEGMENT_SEPARATOR
    element: str = DEFAULT_ELEMENT_SEPARATOR
    sub_element: str = DEFAULT_SUB_ELEMENT_SEPARATOR

    @field_validator("segment", "element", "sub_element")
    @classmethod
    def check_single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"Separator must be a single character, got {value!r}.")
        return value

    @model_validator(mode="after")
    def check_distinct(self) -> "Delimiters":
        if len({self.segment, self.element, self.sub_element}) != 3:
            raise ValueError(
                f"Separators must be distinct (segment={self.segment!r}, "
                f"element={self.element!r}, sub_element={self.sub_element!r})."
            )
        return self

# --- Decoder configuration ---
class DecoderConfig(BaseModel):
    relaxed_segment_id_whitespace: bool = Field(False, description="Trim whitespace around the segment id before dispatch.")
    delimiters: Delimiters = Field(default_factory=Delimiters)
    max_segment_bytes: int = Field(65536, gt=0, description="Longest segment accepted by the scanner.")
    read_size: int = Field(4096, gt=0, description="Chunk size used when pulling from a byte stream.")
    encoding: str = Field("latin-1", description="Text encoding of segment tokens; latin-1 maps every byte one to one.")
    detect_delimiters: bool = Field(False, description="Read separators from the fixed ISA positions when present.")

    def with_overrides(self, **overrides) -> "DecoderConfig":
        """Returns a validated copy with the given fields replaced."""
        if not overrides:
            return self
        data = self.model_dump()
        data.update(overrides)
        return DecoderConfig.model_validate(data)
