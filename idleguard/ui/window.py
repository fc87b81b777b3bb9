"""Pygame window hosting a session guard.

Translates pygame input and window events into page events, drains the
frame scheduler once per frame, and draws the warning modal.
"""

import pygame

from idleguard.host.events import VisibilityState
from idleguard.host.page import PageContext
from idleguard.session.guard import SessionGuard, SessionState
from idleguard.timing.scheduler import FrameScheduler
from idleguard.ui.colors import hex_to_rgb, parse_px

_PAGE_BACKGROUND = (45, 45, 45)
_TEXT_LIGHT = (240, 240, 240)
_TEXT_DARK = (30, 30, 30)
_BUTTON_HEIGHT = 40
_PADDING = 16


class GuardWindow:
    """Desktop stand-in for the browser page the guard protects."""

    def __init__(
        self,
        guard: SessionGuard,
        page: PageContext,
        scheduler: FrameScheduler,
        resolution: tuple[int, int] = (800, 600),
        fps: int = 30,
    ) -> None:
        """Initialize the window.

        Args:
            guard: Guard whose outputs are drawn.
            page: Page context receiving translated events.
            scheduler: Frame scheduler drained every frame.
            resolution: Window resolution (width, height).
            fps: Target frames per second.
        """
        self.guard = guard
        self.page = page
        self.scheduler = scheduler
        self.resolution = resolution
        self.fps = fps

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._title_font: pygame.font.Font | None = None
        self._running = False

        self.modal_rect = pygame.Rect(0, 0, 0, 0)
        self.continue_rect = pygame.Rect(0, 0, 0, 0)
        self.logout_rect = pygame.Rect(0, 0, 0, 0)

    def initialize(self) -> None:
        """Initialize Pygame and create window."""
        pygame.init()
        pygame.display.set_caption("idleguard")
        self._screen = pygame.display.set_mode(self.resolution)
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 26)
        self._title_font = pygame.font.Font(None, 32)
        self._running = True
        self._layout()

    def shutdown(self) -> None:
        """Shutdown Pygame."""
        self._running = False
        pygame.quit()

    def _layout(self) -> None:
        style = self.guard.config.style
        w, h = self.resolution
        modal_w = min(parse_px(style.modal_width, 480), w - 2 * _PADDING)
        modal_h = 240
        self.modal_rect = pygame.Rect((w - modal_w) // 2, (h - modal_h) // 2, modal_w, modal_h)

        button_w = (modal_w - 3 * _PADDING) // 2
        button_y = self.modal_rect.bottom - _PADDING - _BUTTON_HEIGHT
        self.continue_rect = pygame.Rect(
            self.modal_rect.left + _PADDING, button_y, button_w, _BUTTON_HEIGHT
        )
        self.logout_rect = pygame.Rect(
            self.continue_rect.right + _PADDING, button_y, button_w, _BUTTON_HEIGHT
        )

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Translate one pygame event.

        Returns:
            False when the window should close.
        """
        window = self.page.window
        document = self.page.document

        if event.type == pygame.QUIT:
            return False

        if event.type == pygame.MOUSEMOTION:
            window.dispatch("mousemove", event)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if self.guard.show_timeout_modal and self.modal_rect.collidepoint(event.pos):
                # Clicks on the modal belong to the modal, not the page
                self._click_modal(event.pos)
            else:
                window.dispatch("mousedown", event)
                window.dispatch("click", event)
        elif event.type == pygame.MOUSEWHEEL:
            window.dispatch("wheel", event)
            window.dispatch("scroll", event)
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.guard.handle_keydown("Escape")
            window.dispatch("keypress", event)
        elif event.type == pygame.FINGERDOWN:
            window.dispatch("touchstart", event)
        elif event.type == pygame.DROPBEGIN:
            window.dispatch("dragstart", event)
        elif event.type == pygame.WINDOWENTER:
            window.dispatch("mouseenter", event)
        elif event.type == pygame.WINDOWFOCUSGAINED:
            window.dispatch("focus", event)
        elif event.type == pygame.WINDOWFOCUSLOST:
            window.dispatch("blur", event)
        elif event.type in (pygame.WINDOWSHOWN, pygame.WINDOWRESTORED):
            document.set_visibility(VisibilityState.VISIBLE)
        elif event.type in (pygame.WINDOWHIDDEN, pygame.WINDOWMINIMIZED):
            document.set_visibility(VisibilityState.HIDDEN)
        return True

    def _click_modal(self, pos: tuple[int, int]) -> None:
        if self.continue_rect.collidepoint(pos):
            self.guard.on_continue()
        elif self.logout_rect.collidepoint(pos):
            self.guard.on_manual_logout()

    def process_events(self) -> bool:
        """Process Pygame events.

        Returns:
            True if should continue running, False to quit.
        """
        for event in pygame.event.get():
            if not self.handle_event(event):
                return False
        return True

    def render(self) -> None:
        """Render the current frame."""
        if self._screen is None or self._font is None:
            return

        self._screen.fill(_PAGE_BACKGROUND)
        status = self._status_line()
        self._screen.blit(self._font.render(status, True, _TEXT_LIGHT), (_PADDING, _PADDING))

        if self.guard.show_timeout_modal:
            self._draw_modal()

        pygame.display.flip()

    def _status_line(self) -> str:
        state = self.guard.state
        if state == SessionState.WATCHING:
            idle_s = self.guard.monitor.idle_for_ms() / 1000
            return f"Watching - idle for {idle_s:.0f}s"
        return state.name.capitalize()

    def _draw_modal(self) -> None:
        assert self._screen is not None and self._font is not None
        assert self._title_font is not None
        config = self.guard.config
        style = config.style
        content = config.content
        radius = parse_px(style.modal_border_radius, 8)
        rect = self.modal_rect

        header = pygame.Rect(rect.left, rect.top, rect.width, 50)
        footer_top = self.continue_rect.top - _PADDING
        footer = pygame.Rect(rect.left, footer_top, rect.width, rect.bottom - footer_top)
        body = pygame.Rect(rect.left, header.bottom, rect.width, footer.top - header.bottom)

        pygame.draw.rect(self._screen, hex_to_rgb(style.modal_body_color), rect, border_radius=radius)
        pygame.draw.rect(
            self._screen,
            hex_to_rgb(style.modal_header_color),
            header,
            border_top_left_radius=radius,
            border_top_right_radius=radius,
        )
        pygame.draw.rect(
            self._screen,
            hex_to_rgb(style.modal_footer_color),
            footer,
            border_bottom_left_radius=radius,
            border_bottom_right_radius=radius,
        )

        title = self._title_font.render(content.modal_title, True, _TEXT_LIGHT)
        self._screen.blit(title, (header.left + _PADDING, header.centery - title.get_height() // 2))

        message = self._font.render(content.display_message, True, _TEXT_DARK)
        self._screen.blit(message, (body.left + _PADDING, body.top + _PADDING))

        if config.timeouts.show_countdown:
            countdown = self._title_font.render(
                f"{self.guard.countdown}s", True, hex_to_rgb(style.countdown_color)
            )
            self._screen.blit(countdown, (body.left + _PADDING, body.top + 3 * _PADDING))

        self._draw_button(self.continue_rect, content.continue_button_label, style.continue_button_color)
        self._draw_button(self.logout_rect, content.logout_button_label, style.logout_button_color)

    def _draw_button(self, rect: pygame.Rect, label: str, color: str) -> None:
        assert self._screen is not None and self._font is not None
        pygame.draw.rect(self._screen, hex_to_rgb(color, (1, 118, 211)), rect, border_radius=4)
        text = self._font.render(label, True, _TEXT_LIGHT)
        self._screen.blit(text, text.get_rect(center=rect.center))

    def tick(self) -> None:
        """Wait for next frame (maintain FPS)."""
        if self._clock is not None:
            self._clock.tick(self.fps)

    def run_frame(self) -> bool:
        """Run a single frame of the event/render loop.

        Returns:
            True if should continue, False to quit.
        """
        if not self.process_events():
            return False
        self.scheduler.run_pending()
        self.render()
        self.tick()
        return self._running
