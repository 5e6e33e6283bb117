"""Tests for Aggregator class."""

import os

import pytest

from mmgallery.aggregator import Aggregator, creator_key, parse_period_id
from mmgallery.errors import FilesystemError, NotFoundError
from mmgallery.models import Phase
from mmgallery.thumbnail_cache import ThumbnailCache, ThumbnailRenderer


class TestHelpers:
    """Tests for module level helpers."""
    
    @pytest.mark.parametrize('name,key', [
        ('alice_03.png', 'alice'),
        ('_bob99.jpg', 'bob'),
        ('Carol.final.jpg', 'carol'),
        ('2024_dave_1.gif', 'dave'),
        ('12345.png', ''),
    ])
    def test_creator_key(self, name, key):
        """Test creator key derivation."""
        assert creator_key(name) == key
    
    def test_parse_period_id(self):
        """Test parsing folder names."""
        assert parse_period_id('CW_42') == 42
        assert parse_period_id('CW_7') == 7
    
    @pytest.mark.parametrize('name', ['CW_', 'CW_x', 'CW_-1', 'KW_3', 'CW_3a', 'CW_07', 'CW_00'])
    def test_parse_period_id_malformed(self, name):
        """Test that malformed names raise ValueError."""
        with pytest.raises(ValueError):
            parse_period_id(name)


class TestAggregateAll:
    """Tests for Aggregator.aggregate_all."""
    
    def test_sorted_by_id_descending(self, gallery_dir, logger):
        """Test period order."""
        periods = Aggregator(str(gallery_dir), logger=logger).aggregate_all()
        
        assert [p.id for p in periods] == [10, 2, 1]
    
    def test_phases(self, gallery_dir):
        """Test that each period gets its lock-derived phase."""
        periods = {p.id: p for p in Aggregator(str(gallery_dir)).aggregate_all()}
        
        assert periods[1].phase is Phase.CLOSED
        assert periods[2].phase is Phase.VOTING_OPEN
        assert periods[10].phase is Phase.SUBMITTING
        assert [p.can_vote for p in (periods[1], periods[2], periods[10])] == [False, True, False]
    
    def test_results_only_when_closed(self, gallery_dir):
        """Test that only the closed period carries ranked results."""
        periods = {p.id: p for p in Aggregator(str(gallery_dir)).aggregate_all()}
        
        results = periods[1].results
        assert [(r.file_name, r.votes, r.rank) for r in results] == [
            ('bob.jpg', 3, 1),
            ('carol_2.jpg', 2, 2),
        ]
        assert results[0].href == 'mm/CW_1/bob.jpg'
        assert periods[2].results is None
        assert periods[10].results is None
    
    def test_entries(self, gallery_dir):
        """Test entry fields and order."""
        periods = {p.id: p for p in Aggregator(str(gallery_dir), link_prefix='media').aggregate_all()}
        
        entries = periods[1].entries
        assert [e.file_name for e in entries] == ['carol_2.jpg', 'bob.jpg', 'alice_01.jpg']
        assert entries[0].href == 'media/CW_1/carol_2.jpg'
        assert entries[0].thumbnail.size == (330, 165)
        assert entries[0].modified > entries[1].modified
    
    def test_vote_lock_without_upload_lock(self, make_week, tmp_path):
        """Test that the anomalous lock combination has no voting and no results."""
        make_week(5, images={'a.jpg': 1}, locks=['vote'], votes='x:a.jpg\n')
        
        period = Aggregator(str(tmp_path)).aggregate_all()[0]
        
        assert period.phase is Phase.SUBMITTING
        assert period.can_vote is False
        assert period.results is None
    
    @pytest.mark.parametrize('votes', [None, ''])
    def test_closed_without_ballots(self, make_week, tmp_path, votes):
        """Test that a missing or empty votes.txt yields empty results."""
        make_week(5, images={'a.jpg': 1}, locks=['upload', 'vote'], votes=votes)
        
        period = Aggregator(str(tmp_path)).aggregate_all()[0]
        
        assert period.results == []
        assert period.ballot_error is None
    
    def test_unparseable_ballots_recorded(self, make_week, tmp_path):
        """Test that a broken ballot file is recorded and the period still returned."""
        make_week(5, images={'a.jpg': 1}, locks=['upload', 'vote'],
                  extra_files={'votes.txt': b'\xff\xfe'})
        
        periods = Aggregator(str(tmp_path)).aggregate_all()
        
        assert len(periods) == 1
        assert periods[0].results is None
        assert 'votes.txt' in periods[0].ballot_error
        assert len(periods[0].entries) == 1
    
    def test_broken_image_does_not_abort(self, make_week, tmp_path):
        """Test that an undecodable image gets a placeholder and the rest is listed."""
        make_week(5, images={'good.jpg': 2, 'broken.png': (1, b'')})
        
        period = Aggregator(str(tmp_path)).aggregate_all()[0]
        
        by_name = {e.file_name: e for e in period.entries}
        assert set(by_name) == {'good.jpg', 'broken.png'}
        assert by_name['broken.png'].thumbnail.size == (330, 330)
        assert by_name['broken.png'].thumbnail.preview == ''
        assert by_name['broken.png'].thumbnail.is_placeholder
        assert by_name['good.jpg'].thumbnail.preview
    
    def test_corrupt_png_chunk_does_not_abort(self, make_week, tmp_path, sample_png_bytes):
        """Test that a PNG with a mangled chunk gets a placeholder next to good entries."""
        mangled = sample_png_bytes[:37] + b'\x12cH\x8c' + sample_png_bytes[41:]
        make_week(5, images={'good.jpg': 2, 'bad.png': (1, mangled)})
        
        period = Aggregator(str(tmp_path)).aggregate_all()[0]
        
        by_name = {e.file_name: e for e in period.entries}
        assert set(by_name) == {'good.jpg', 'bad.png'}
        assert by_name['bad.png'].thumbnail.is_placeholder
        assert not by_name['good.jpg'].thumbnail.is_placeholder
    
    def test_leading_zero_folder_skipped(self, make_week, tmp_path):
        """Test that CW_07 is skipped so CW_7 is the only period with id 7."""
        make_week('07', images={'a.jpg': 1})
        make_week(7, images={'b.jpg': 1}, locks=['upload', 'vote'], votes='x:b.jpg\n')
        aggregator = Aggregator(str(tmp_path))
        
        periods = aggregator.aggregate_all()
        
        assert [p.id for p in periods] == [7]
        assert aggregator.skipped_folders == ['CW_07']
        assert [e.href for e in periods[0].entries] == ['mm/CW_7/b.jpg']
        assert [r.href for r in periods[0].results] == ['mm/CW_7/b.jpg']
    
    def test_malformed_folder_skipped(self, make_week, tmp_path, caplog):
        """Test that CW_ folders without an integer suffix are skipped with a warning."""
        make_week(3, images={'a.jpg': 1})
        (tmp_path / 'CW_draft').mkdir()
        (tmp_path / 'other').mkdir()
        aggregator = Aggregator(str(tmp_path))
        
        with caplog.at_level('WARNING'):
            periods = aggregator.aggregate_all()
        
        assert [p.id for p in periods] == [3]
        assert aggregator.skipped_folders == ['CW_draft']
        assert 'CW_draft' in caplog.text
    
    def test_ignores_files_named_like_periods(self, make_week, tmp_path):
        """Test that a plain file matching CW_* is not treated as a period."""
        make_week(3, images={'a.jpg': 1})
        (tmp_path / 'CW_4').write_bytes(b'')
        
        assert [p.id for p in Aggregator(str(tmp_path)).aggregate_all()] == [3]
    
    def test_template_reference(self, make_week, tmp_path):
        """Test that a template file is passed through as a link."""
        make_week(3, images={'a.jpg': 1, 'template.png': 2})
        
        period = Aggregator(str(tmp_path)).aggregate_all()[0]
        
        assert period.template == 'mm/CW_3/template.png'
        assert [e.file_name for e in period.entries] == ['a.jpg']
    
    def test_missing_base_dir(self, tmp_path):
        """Test that a missing base directory raises FilesystemError."""
        with pytest.raises(FilesystemError):
            Aggregator(str(tmp_path / 'nope')).aggregate_all()
    
    def test_unreadable_base_dir(self, tmp_path, mocker):
        """Test that a base directory that cannot be listed raises FilesystemError."""
        mocker.patch('mmgallery.aggregator.os.listdir', side_effect=PermissionError('denied'))
        
        with pytest.raises(FilesystemError, match='denied'):
            Aggregator(str(tmp_path)).aggregate_all()
    
    def test_empty_base_dir(self, tmp_path):
        """Test that a base directory without periods yields nothing."""
        assert Aggregator(str(tmp_path)).aggregate_all() == []
    
    def test_thumbnails_shared_across_calls(self, gallery_dir, mocker):
        """Test that a second aggregation reuses cached thumbnails."""
        renderer = ThumbnailRenderer()
        spy = mocker.spy(renderer, 'render')
        aggregator = Aggregator(str(gallery_dir), cache=ThumbnailCache(renderer))
        
        aggregator.aggregate_all()
        first_calls = spy.call_count
        aggregator.aggregate_all()
        
        assert first_calls == 6
        assert spy.call_count == 6


class TestAggregateOne:
    """Tests for Aggregator.aggregate_one."""
    
    def test_by_id(self, gallery_dir):
        """Test aggregating one period by identifier."""
        period = Aggregator(str(gallery_dir)).aggregate_one('2')
        
        assert period.id == 2
        assert [e.file_name for e in period.entries] == ['dave.jpg', 'alice_02.jpg']
        assert period.phase is Phase.VOTING_OPEN
    
    def test_by_path(self, gallery_dir):
        """Test aggregating one period by folder path."""
        period = Aggregator(str(gallery_dir)).aggregate_one(os.path.join(str(gallery_dir), 'CW_10'))
        
        assert period.id == 10
    
    def test_no_ballots(self, gallery_dir):
        """Test that a closed period has no results in the single view."""
        period = Aggregator(str(gallery_dir)).aggregate_one(1)
        
        assert period.phase is Phase.CLOSED
        assert period.results is None
    
    def test_missing(self, gallery_dir):
        """Test that an unknown period raises NotFoundError."""
        with pytest.raises(NotFoundError):
            Aggregator(str(gallery_dir)).aggregate_one(99)


class TestAggregateByCreator:
    """Tests for Aggregator.aggregate_by_creator."""
    
    def test_filters_entries(self, gallery_dir):
        """Test that only the creator's entries remain."""
        periods = Aggregator(str(gallery_dir)).aggregate_by_creator('alice')
        
        by_id = {p.id: p for p in periods}
        assert [p.id for p in periods] == [10, 2, 1]
        assert [e.file_name for e in by_id[1].entries] == ['alice_01.jpg']
        assert [e.file_name for e in by_id[2].entries] == ['alice_02.jpg']
        assert by_id[10].entries == []
    
    def test_clears_voting(self, gallery_dir):
        """Test that voting and results are cleared on every period."""
        periods = Aggregator(str(gallery_dir)).aggregate_by_creator('bob')
        
        assert all(not p.can_vote for p in periods)
        assert all(p.results is None for p in periods)
        by_id = {p.id: p for p in periods}
        assert [e.file_name for e in by_id[10].entries] == ['_bob99.jpg']
    
    def test_unknown_creator(self, gallery_dir):
        """Test that a creator without entries raises NotFoundError."""
        with pytest.raises(NotFoundError):
            Aggregator(str(gallery_dir)).aggregate_by_creator('mallory')
