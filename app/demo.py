"""
Minechain Hint Engine - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from collections import deque
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import streamlit as st
from typing import Dict, List, Optional, Set, Tuple

from minechain import HintClient, RequestKind
from minechain.utils import get_neighborhoods

Cell = Tuple[int, int]


def generate_clues(width: int, height: int, mines: int, seed: int) -> List[List[object]]:
    """Place mines uniformly at random and compute every clue (host-side only)."""
    rng = np.random.default_rng(seed)
    flat = rng.choice(width * height, size=mines, replace=False)
    mine_cells = {(int(i) % width, int(i) // width) for i in flat}
    nbrs = get_neighborhoods(width, height)

    clues: List[List[object]] = []
    for y in range(height):
        row: List[object] = []
        for x in range(width):
            if (x, y) in mine_cells:
                row.append("M")
            else:
                row.append(sum(1 for n in nbrs[(x, y)] if n in mine_cells))
        clues.append(row)
    return clues


def flood_reveal(
    clues: List[List[object]], revealed: Set[Cell], start: Cell
) -> List[Cell]:
    """Reveal a cell and, through zero clues, its connected region."""
    width, height = len(clues[0]), len(clues)
    nbrs = get_neighborhoods(width, height)
    queue = deque([start])
    seen = {start}
    batch: List[Cell] = []

    while queue:
        x, y = queue.popleft()
        if (x, y) in revealed:
            continue
        revealed.add((x, y))
        batch.append((x, y))
        if clues[y][x] == 0:
            for n in nbrs[(x, y)]:
                if n not in seen and n not in revealed:
                    seen.add(n)
                    queue.append(n)
    return batch


def fetch_hints(client: HintClient) -> Dict[RequestKind, Set[Cell]]:
    """Ask the engine for every classification and collect the fresh answers."""
    hints: Dict[RequestKind, Set[Cell]] = {}
    for kind in RequestKind:
        client.request(kind)
        client.engine.join(timeout=10)
        response = client.poll(timeout=1.0)
        hints[kind] = set(response.cells) if response is not None else set()
    return hints


def render_board_html(
    clues: List[List[object]],
    revealed: Set[Cell],
    hints: Dict[RequestKind, Set[Cell]],
    lost_cell: Optional[Cell] = None,
) -> str:
    """Render the board as HTML, colouring hidden cells by engine verdict."""
    width, height = len(clues[0]), len(clues)
    if width >= 25:
        cell_size = 16
        font_size = "11px"
    elif width >= 16:
        cell_size = 20
        font_size = "13px"
    else:
        cell_size = 26
        font_size = "15px"

    colors = {
        "1": "#0000ff",
        "2": "#008000",
        "3": "#ff0000",
        "4": "#000080",
        "5": "#800000",
        "6": "#008080",
        "7": "#000000",
        "8": "#808080",
    }

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for y in range(height):
        html += "<tr>"
        for x in range(width):
            cell = (x, y)
            if cell == lost_cell:
                text, bg, text_color = "M", "#ff0000", "#ffffff"
            elif cell in revealed:
                value = str(clues[y][x])
                text = " " if value == "0" else value
                bg = "#f0f0f0" if value == "0" else "#ffffff"
                text_color = colors.get(value, "#000000")
            elif cell in hints.get(RequestKind.FLAGS, set()):
                text, bg, text_color = "F", "#ffa500", "#ffffff"
            elif cell in hints.get(RequestKind.SAFES, set()):
                text, bg, text_color = "S", "#b6f2b6", "#006400"
            elif cell in hints.get(RequestKind.LOWEST, set()):
                text, bg, text_color = "L", "#fff3a0", "#806000"
            else:
                text, bg, text_color = ".", "#c0c0c0", "#666666"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: 1px solid #999;
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{text}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def new_game(width: int, height: int, mines: int, seed: int) -> None:
    if st.session_state.get("client") is not None:
        st.session_state.client.close()
    clues = generate_clues(width, height, mines, seed)
    client = HintClient()
    client.init(clues, mines)
    st.session_state.client = client
    st.session_state.clues = clues
    st.session_state.revealed = set()
    st.session_state.lost_cell = None


def main():
    st.set_page_config(
        page_title="Minechain Hint Engine",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minechain Hint Engine")
    st.markdown("""
    Reveal cells and watch the engine classify the hidden ones as guaranteed
    safe, guaranteed mines, or lowest-probability guesses.
    """)

    st.sidebar.header("Game Configuration")

    preset = st.sidebar.selectbox(
        "Difficulty Preset",
        ["Beginner (9x9, 10)", "Intermediate (16x16, 40)", "Custom"],
    )

    if preset == "Beginner (9x9, 10)":
        width, height, mines = 9, 9, 10
    elif preset == "Intermediate (16x16, 40)":
        width, height, mines = 16, 16, 40
    else:
        width = st.sidebar.slider("Width", 3, 24, 9)
        height = st.sidebar.slider("Height", 3, 24, 9)
        mines = st.sidebar.slider("Mines", 1, width * height - 1, min(10, width * height - 1))

    seed = st.sidebar.number_input("Seed", min_value=0, value=0, step=1)

    current_settings = (width, height, mines, int(seed))
    if st.session_state.get("settings") != current_settings:
        new_game(width, height, mines, int(seed))
        st.session_state.settings = current_settings

    if st.sidebar.button("Regenerate Board", type="primary"):
        new_game(width, height, mines, int(seed) + 1)
        st.rerun()

    client: HintClient = st.session_state.client
    clues = st.session_state.clues
    revealed: Set[Cell] = st.session_state.revealed

    col1, col2 = st.columns([3, 1])

    with col2:
        st.subheader("Reveal")
        x = st.number_input("x (column)", min_value=0, max_value=width - 1, value=width // 2)
        y = st.number_input("y (row)", min_value=0, max_value=height - 1, value=height // 2)
        if st.button("Reveal cell") and st.session_state.lost_cell is None:
            cell = (int(x), int(y))
            if clues[cell[1]][cell[0]] == "M":
                st.session_state.lost_cell = cell
            else:
                client.reveal(flood_reveal(clues, revealed, cell))

    hints = fetch_hints(client)

    with col1:
        st.subheader("Game Board")
        st.markdown(
            render_board_html(clues, revealed, hints, st.session_state.lost_cell),
            unsafe_allow_html=True,
        )
        if st.session_state.lost_cell is not None:
            st.error("Game Over! Hit a mine.")
        elif len(revealed) == width * height - mines:
            st.success("All safe cells revealed.")

        st.markdown("""
        <div style="font-size: 12px; margin-top: 10px;">
        <b>Legend:</b>
        <span style="background: #c0c0c0; color: #666666; padding: 2px 6px; margin: 0 4px; font-weight: bold;">.</span> Hidden
        <span style="background: #b6f2b6; color: #006400; padding: 2px 6px; margin: 0 4px; font-weight: bold;">S</span> Guaranteed safe
        <span style="background: #ffa500; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">F</span> Guaranteed mine
        <span style="background: #fff3a0; color: #806000; padding: 2px 6px; margin: 0 4px; font-weight: bold;">L</span> Lowest probability
        </div>
        """, unsafe_allow_html=True)

    with col2:
        st.markdown("---")
        st.subheader("Engine Statistics")
        st.metric("Cells revealed", len(revealed))
        st.metric("Guaranteed safe", len(hints[RequestKind.SAFES]))
        st.metric("Guaranteed mines", len(hints[RequestKind.FLAGS]))
        st.metric("Lowest-probability cells", len(hints[RequestKind.LOWEST]))


if __name__ == "__main__":
    main()
