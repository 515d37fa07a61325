import logging
import sys

from PyQt5.QtWidgets import QApplication

from IC_Libs.ImageEditingLib.image_editor_window import ImageCraftEditorWindow


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    window = ImageCraftEditorWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
