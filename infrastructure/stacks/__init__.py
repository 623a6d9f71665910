"""CDK stacks for the photo gallery."""

from .gallery_stack import PhotoGalleryStack

__all__ = ["PhotoGalleryStack"]
