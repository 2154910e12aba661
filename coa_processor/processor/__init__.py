from coa_processor.processor.processor import Processor, build_processor

__all__ = ["Processor", "build_processor"]
