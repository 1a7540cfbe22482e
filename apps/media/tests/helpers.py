"""Builders for in-memory uploads used by the media tests."""

import struct
import zlib
from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

CONTENT_TYPES = {
    'PNG': 'image/png',
    'JPEG': 'image/jpeg',
    'GIF': 'image/gif',
    'WEBP': 'image/webp',
}


def image_bytes(image_format='PNG', size=(10, 10), color=(200, 120, 80), **save_kwargs):
    buffer = BytesIO()
    Image.new('RGB', size, color).save(buffer, format=image_format, **save_kwargs)
    return buffer.getvalue()


def image_file(name='photo.png', image_format='PNG', size=(10, 10), **save_kwargs):
    return SimpleUploadedFile(
        name,
        image_bytes(image_format, size, **save_kwargs),
        content_type=CONTENT_TYPES[image_format],
    )


def animated_gif_file(name='animated.gif', frames=3, size=(20, 20)):
    images = [Image.new('RGB', size, (index * 60, 0, 0)) for index in range(frames)]
    buffer = BytesIO()
    images[0].save(buffer, format='GIF', save_all=True, append_images=images[1:], duration=100, loop=0)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/gif')


def mp4_file(name='clip.mp4'):
    return SimpleUploadedFile(name, b'\x00\x00\x00\x18ftypmp42' + b'\x00' * 64, content_type='video/mp4')


def webm_file(name='clip.webm'):
    # EBML header declaring the webm doctype
    header = b'\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01\x42\xf7\x81\x01\x42\xf2\x81\x04\x42\xf3\x81\x08\x42\x82\x84webm'
    return SimpleUploadedFile(name, header + b'\x00' * 64, content_type='video/webm')


def heic_bytes():
    return b'\x00\x00\x00\x18ftypheic\x00\x00\x00\x00mif1heic' + b'\x00' * 64


def oversized_png_bytes(size=(20000, 20000)):
    """A tiny PNG whose header declares ``size`` pixels."""
    data = bytearray(image_bytes('PNG', (1, 1)))
    struct.pack_into('>II', data, 16, *size)
    struct.pack_into('>I', data, 29, zlib.crc32(bytes(data[12:29])))
    return bytes(data)
