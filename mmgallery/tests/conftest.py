"""
Pytest fixtures for mmgallery tests.
"""

import io
import os
import time

import pytest


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes (200x100)."""
    from PIL import Image
    
    img = Image.new('RGB', (200, 100), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency (100x150)."""
    from PIL import Image
    
    img = Image.new('RGBA', (100, 150), color=(255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def sample_gif_bytes():
    """Fixture providing sample GIF image bytes (50x50)."""
    from PIL import Image
    
    img = Image.new('P', (50, 50), color=3)
    buffer = io.BytesIO()
    img.save(buffer, format='GIF')
    return buffer.getvalue()


@pytest.fixture
def make_week(tmp_path, sample_image_bytes):
    """
    Fixture providing a factory that creates a CW_<n> folder under tmp_path.
    
    Usage:
        folder = make_week(3, images={'a.jpg': 100}, locks=['upload'], votes='x:a.jpg\\n')
    
    images maps file name to a modification time offset in seconds; the
    content is the sample JPEG unless given as (offset, bytes).
    """
    base_time = time.time() - 10000
    
    def _make(number, images=None, locks=(), votes=None, extra_files=None):
        folder = tmp_path / f"CW_{number}"
        folder.mkdir(exist_ok=True)
        for name, value in (images or {}).items():
            if isinstance(value, tuple):
                offset, data = value
            else:
                offset, data = value, sample_image_bytes
            path = folder / name
            path.write_bytes(data)
            os.utime(path, (base_time + offset, base_time + offset))
        for lock in locks:
            (folder / f"{lock}.lock").write_bytes(b'')
        if votes is not None:
            (folder / 'votes.txt').write_text(votes, encoding='utf-8')
        for name, data in (extra_files or {}).items():
            (folder / name).write_bytes(data)
        return folder
    
    return _make


@pytest.fixture
def gallery_dir(tmp_path, make_week):
    """
    Fixture providing a gallery with three weeks:
    
        CW_1  closed, with ballots
        CW_2  voting open
        CW_10 submitting
    """
    make_week(1, images={'alice_01.jpg': 10, 'bob.jpg': 20, 'carol_2.jpg': 30},
              locks=['upload', 'vote'],
              votes='alice:bob.jpg:carol_2.jpg\nbob:carol_2.jpg\ncarol:bob.jpg:bob.jpg\n')
    make_week(2, images={'alice_02.jpg': 40, 'dave.jpg': 50}, locks=['upload'])
    make_week(10, images={'_bob99.jpg': 60})
    return tmp_path


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
