import pytest

from application.interpreter import STOPPED_MESSAGE, Interpreter
from domain.errors import OctaveOutOfRange, PlaybackStopped
from domain.events import (
    CommentEvent,
    NoteEvent,
    NoticeEvent,
    SectionEvent,
    TempoEvent,
)
from domain.models import PlaybackSettings
from domain.parser import SongParser
from domain.program import OctaveShift, Program, SetOctave
from domain.theory import beat_seconds, frequency, pause_seconds


def test_end_to_end_playback_events(perform, driver, events) -> None:
    perform('tempo 120\n[Song]\nC D E F\n')

    assert events[0] == TempoEvent(bpm=120)
    assert events[1] == SectionEvent(name='Song')
    assert events[2] == TempoEvent(bpm=120)
    assert events[3:] == [
        NoteEvent(name='C', octave='4', duration='4'),
        NoteEvent(name='D', octave='4', duration='4'),
        NoteEvent(name='E', octave='4', duration='4'),
        NoteEvent(name='F', octave='4', duration='4'),
    ]
    frequencies = [hz for hz, _ in driver.tones]
    assert frequencies == sorted(frequencies)
    assert len(set(frequencies)) == 4
    assert frequencies[0] == pytest.approx(frequency('C4'))


def test_each_note_is_followed_by_the_standard_pause(perform, driver) -> None:
    perform('tempo 60\nC\nR')

    assert driver.waits == [pause_seconds(60), pause_seconds(60)]


def test_rest_uses_silence_path(perform, driver) -> None:
    perform('R, 2')

    assert driver.tones == []
    assert driver.rests == [pytest.approx(beat_seconds(2, 120))]


def test_note_duration_follows_state(perform, driver) -> None:
    perform('duration 8\nC\nC 8+16')

    assert driver.tones[0][1] == pytest.approx(beat_seconds(8, 120))
    assert driver.tones[1][1] == pytest.approx(beat_seconds(8, 120) + beat_seconds(16, 120))


def test_section_names_are_case_insensitive(perform, events) -> None:
    perform('play INTRO\n[Intro]\nC\n[intro]\nD')

    sections = [event.name for event in events if isinstance(event, SectionEvent)]
    assert sections == ['Song', 'Intro']
    assert [event.name for event in events if isinstance(event, NoteEvent)] == ['C', 'D']


def test_unresolved_section_is_an_empty_boundary(perform, events, driver) -> None:
    perform('play Nonexistent')

    assert events[1:] == [SectionEvent(name='Song'), SectionEvent(name='Nonexistent')]
    assert driver.notes_played == 0


def test_repeat_zero_plays_nothing(perform, events) -> None:
    perform('repeat 0 Verse\n[Verse]\nC')

    assert events == [TempoEvent(bpm=120), SectionEvent(name='Song')]


def test_repeat_plays_section_count_times(perform, events, driver) -> None:
    perform('repeat 3 Verse\n[Verse]\nC')

    assert events.count(SectionEvent(name='Verse')) == 3
    assert driver.notes_played == 3


def test_tempo_compounding(perform, events) -> None:
    interpreter = perform('tempo 100\ntempo * 2\ntempo / 4')

    assert interpreter.state.tempo == 50
    assert [event for event in events if isinstance(event, TempoEvent)] == [
        TempoEvent(bpm=120),
        TempoEvent(bpm=100),
        TempoEvent(bpm=200),
        TempoEvent(bpm=50),
    ]


def test_tempo_display_truncates_but_keeps_precision(perform, events) -> None:
    interpreter = perform('tempo 100\ntempo / 3\ntempo * 3')

    assert [event.bpm for event in events if isinstance(event, TempoEvent)][2] == 33
    assert interpreter.state.tempo == pytest.approx(100)


def test_octave_changes(perform, events) -> None:
    perform('octave 2\nC\noctave up\nC\n++\nC\n-\nC\noctave down\nC')

    octaves = [event.octave for event in events if isinstance(event, NoteEvent)]
    assert octaves == ['2', '3', '5', '4', '3']


def test_explicit_octave_does_not_change_state(perform, events) -> None:
    interpreter = perform('C6\nC')

    octaves = [event.octave for event in events if isinstance(event, NoteEvent)]
    assert octaves == ['6', '4']
    assert interpreter.state.octave == 4


@pytest.mark.parametrize('octave', [0, 8])
def test_octave_bounds_are_inclusive(driver, octave: int) -> None:
    program = Program()
    program.append('Song', SetOctave(octave))

    interpreter = Interpreter(program, driver)
    interpreter.run()

    assert interpreter.state.octave == octave


@pytest.mark.parametrize('octave', [9, -1])
def test_octave_out_of_range_is_fatal(driver, octave: int) -> None:
    program = Program()
    program.append('Song', SetOctave(octave))

    with pytest.raises(OctaveOutOfRange):
        Interpreter(program, driver).run()


def test_octave_shift_past_bounds_aborts_the_run(perform, driver) -> None:
    with pytest.raises(OctaveOutOfRange):
        perform('octave 8\nC\n+\nD')

    assert driver.notes_played == 1


def test_relative_octave_shift_action(driver) -> None:
    program = Program()
    program.append('Song', OctaveShift(-4))

    interpreter = Interpreter(program, driver)
    interpreter.run()

    assert interpreter.state.octave == 0


def test_implicit_octave_resolves_at_play_time(perform, driver) -> None:
    perform('play Melody\noctave 5\nplay Melody\n[Melody]\nA')

    assert [hz for hz, _ in driver.tones] == [
        pytest.approx(440.0),
        pytest.approx(880.0),
    ]


def test_comments_are_displayed(perform, events) -> None:
    perform('# Verse one\nC')

    assert events[2] == CommentEvent(comment='Verse one')
    assert events[2].render() == '## Verse one'


def test_loop_runs_until_cancelled(driver_factory, events) -> None:
    driver = driver_factory(stop_after_notes=5)
    program = SongParser().parse('loop Riff\n[Riff]\nC D')
    interpreter = Interpreter(program, driver, on_event=events.append)

    with pytest.raises(PlaybackStopped):
        interpreter.run()

    assert driver.notes_played == 5
    assert events.count(SectionEvent(name='Riff')) == 3
    assert events[-1] == NoticeEvent(message=STOPPED_MESSAGE)


def test_cancellation_during_pause_stops_everything(driver_factory, events) -> None:
    driver = driver_factory()
    program = SongParser().parse('C\nD\nE')

    def stop_on_first_note(event) -> None:
        events.append(event)
        if isinstance(event, NoteEvent):
            driver.stop_request.set()

    with pytest.raises(PlaybackStopped):
        Interpreter(program, driver, on_event=stop_on_first_note).run()

    assert driver.notes_played == 1
    assert [event for event in events if isinstance(event, NoticeEvent)] == [
        NoticeEvent(message=STOPPED_MESSAGE)
    ]


def test_keyboard_interrupt_during_note_stops_playback(driver_factory, events) -> None:
    class InterruptedDriver(driver_factory):
        def tone(self, frequency: float, duration: float) -> None:
            raise KeyboardInterrupt

    program = SongParser().parse('C\nD')

    with pytest.raises(PlaybackStopped):
        Interpreter(program, InterruptedDriver(), on_event=events.append).run()

    assert events[-1] == NoticeEvent(message=STOPPED_MESSAGE)
    assert len([event for event in events if isinstance(event, NoteEvent)]) == 1


def test_loop_over_unknown_section_stops_on_request(driver, events) -> None:
    program = SongParser().parse('loop Nothing')

    def stop_after_three_sections(event) -> None:
        events.append(event)
        if events.count(SectionEvent(name='Nothing')) == 3:
            driver.stop_request.set()

    with pytest.raises(PlaybackStopped):
        Interpreter(program, driver, on_event=stop_after_three_sections).run()

    assert events.count(SectionEvent(name='Nothing')) == 3
    assert events[-1] == NoticeEvent(message=STOPPED_MESSAGE)
    assert driver.notes_played == 0


def test_loop_over_section_without_notes_stops_on_request(driver, events) -> None:
    program = SongParser().parse('loop Chatter\n[Chatter]\n# la la\ntempo * 2')

    def stop_after_second_comment(event) -> None:
        events.append(event)
        if events.count(CommentEvent(comment='la la')) == 2:
            driver.stop_request.set()

    with pytest.raises(PlaybackStopped):
        Interpreter(program, driver, on_event=stop_after_second_comment).run()

    assert events.count(SectionEvent(name='Chatter')) == 2
    assert events[-1] == NoticeEvent(message=STOPPED_MESSAGE)


def test_settings_seed_the_state(perform, driver) -> None:
    interpreter = perform('C', PlaybackSettings(tempo=60, octave=3, duration=2))

    assert interpreter.state.octave == 3
    assert driver.tones == [(pytest.approx(frequency('C3')), pytest.approx(2.0))]


def test_run_can_start_from_another_section(driver, events) -> None:
    program = SongParser().parse('C\n[Bridge]\nD')

    Interpreter(program, driver, on_event=events.append).run('bridge')

    assert events[1] == SectionEvent(name='Bridge')
    assert driver.notes_played == 1


def test_independent_performances_do_not_share_state(driver) -> None:
    program = SongParser().parse('octave 7\ntempo 200')

    first = Interpreter(program, driver)
    first.run()
    second = Interpreter(SongParser().parse('C'), driver)

    assert first.state.octave == 7
    assert second.state.octave == 4
    assert second.state.tempo == 120
